"""
Story Kernel API — FastAPI endpoints.

Exposes the kernel to presentation clients:
- Story loading
- Timeline and snapshot inspection
- Causal dependency queries
- Structural validation
- Configuration
"""

from typing import List, Optional

from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from story_kernel.causality.resolver import CausalityResolver
from story_kernel.models.analysis import StoryAnalysis
from story_kernel.models.config import KernelConfig
from story_kernel.models.story import StoryData
from story_kernel.simulation.analyzer import StoryAnalyzer
from story_kernel.world_model.store import StoryStore


# --- Response Models ---

class StorySummaryResponse(BaseModel):
    valid: bool
    applied_acts: int
    rejected_acts: List[str]
    dependency_edges: int
    location_issues: int
    reference_issues: int
    act_issues: int
    fingerprint: str


def _summarize(analysis: StoryAnalysis) -> StorySummaryResponse:
    simulation = analysis.simulation
    return StorySummaryResponse(
        valid=analysis.valid,
        applied_acts=len(simulation.timeline),
        rejected_acts=[str(act_id) for act_id in simulation.rejected],
        dependency_edges=len(analysis.dependencies.edges),
        location_issues=len(analysis.location_validation.errors),
        reference_issues=len(analysis.reference_validation.errors),
        act_issues=len(analysis.act_validation.errors),
        fingerprint=simulation.fingerprint(),
    )


def _parse_entity_id(raw: str):
    """Path parameters arrive as text; numeric ids in stories are integers."""
    try:
        return int(raw)
    except ValueError:
        return raw


# --- Application Factory ---

def create_app(
    store: Optional[StoryStore] = None,
    config: Optional[KernelConfig] = None,
) -> FastAPI:
    """Create and configure the FastAPI application."""

    app = FastAPI(
        title="Story Kernel API",
        description="Narrative causality simulation and world validation",
        version="0.1.0",
    )

    app.state.store = store or StoryStore()
    app.state.config = config or KernelConfig()

    def _analyze(story: StoryData) -> StoryAnalysis:
        return StoryAnalyzer(app.state.config).analyze(story)

    def _require_analysis() -> StoryAnalysis:
        analysis = app.state.store.analysis
        if analysis is None:
            raise HTTPException(404, "No story loaded")
        return analysis

    def _require_act(analysis: StoryAnalysis, raw_act_id: str):
        for act_id in (_parse_entity_id(raw_act_id), raw_act_id):
            if act_id in analysis.simulation.act_statuses:
                return act_id
        raise HTTPException(404, "Act not found")

    # === STORY ===

    @app.post("/story")
    def load_story(story: StoryData):
        """Load a story, replacing the current one, and analyze it."""
        analysis = _analyze(story)
        app.state.store.load(story, analysis)
        return _summarize(analysis)

    @app.get("/story")
    def get_story():
        """The currently loaded story."""
        story = app.state.store.story
        if story is None:
            raise HTTPException(404, "No story loaded")
        return story.model_dump(mode="json", by_alias=True)

    @app.delete("/story")
    def clear_story():
        app.state.store.clear()
        return {"status": "cleared"}

    @app.post("/analyze")
    def analyze_story(story: StoryData):
        """Stateless analysis of a posted story."""
        return _analyze(story).model_dump(mode="json", by_alias=True)

    # === TIMELINE ===

    @app.get("/timeline")
    def get_timeline():
        """Applied acts with the snapshot each one produced."""
        analysis = _require_analysis()
        return [entry.model_dump(mode="json", by_alias=True) for entry in analysis.simulation.timeline]

    @app.get("/timeline/state")
    def get_state_at(timestamp: float):
        """World snapshot in effect at ``timestamp``."""
        analysis = _require_analysis()
        return analysis.simulation.state_at(timestamp).model_dump(mode="json")

    @app.get("/rejected")
    def get_rejected():
        """Precondition failures keyed by act id."""
        analysis = _require_analysis()
        return {
            str(act_id): result.model_dump(mode="json", by_alias=True)
            for act_id, result in analysis.simulation.rejected.items()
        }

    # === CAUSALITY ===

    @app.get("/causality/graph")
    def get_dependency_graph():
        analysis = _require_analysis()
        graph = analysis.dependencies
        return {
            **graph.model_dump(mode="json"),
            "acyclic": graph.is_acyclic(),
        }

    @app.get("/causality/acts/{act_id}/dependencies")
    def get_act_dependencies(act_id: str):
        """Edges into an act: what it depends on."""
        analysis = _require_analysis()
        key = _require_act(analysis, act_id)
        return [e.model_dump(mode="json") for e in analysis.dependencies.dependencies_of(key)]

    @app.get("/causality/acts/{act_id}/dependents")
    def get_act_dependents(act_id: str):
        """Edges out of an act: what depends on it."""
        analysis = _require_analysis()
        key = _require_act(analysis, act_id)
        return [e.model_dump(mode="json") for e in analysis.dependencies.dependents_of(key)]

    @app.get("/causality/acts/{act_id}/removable")
    def get_act_removable(act_id: str):
        analysis = _require_analysis()
        key = _require_act(analysis, act_id)
        return analysis.dependencies.can_remove(key).model_dump(mode="json")

    @app.get("/causality/acts/{act_id}/chain")
    def get_act_chain(act_id: str):
        """Every act this one transitively depends on."""
        analysis = _require_analysis()
        key = _require_act(analysis, act_id)
        return analysis.dependencies.causal_chain(key)

    @app.get("/causality/acts/{act_id}/effects")
    def get_act_effects(act_id: str):
        """Every act that transitively depends on this one."""
        analysis = _require_analysis()
        key = _require_act(analysis, act_id)
        return analysis.dependencies.effects_of(key)

    @app.get("/causality/entities/{entity_id}/trace")
    def trace_entity(entity_id: str):
        """Applied acts that touched an entity, earliest first."""
        analysis = _require_analysis()
        resolver = CausalityResolver()
        acts = resolver.trace(analysis.simulation, _parse_entity_id(entity_id))
        if not acts:
            acts = resolver.trace(analysis.simulation, entity_id)
        return [act.model_dump(mode="json", by_alias=True) for act in acts]

    # === VALIDATION ===

    @app.get("/validation/locations")
    def get_location_validation():
        analysis = _require_analysis()
        return analysis.location_validation.model_dump(mode="json")

    @app.get("/validation/references")
    def get_reference_validation():
        analysis = _require_analysis()
        return analysis.reference_validation.model_dump(mode="json")

    @app.get("/validation/acts")
    def get_act_validation():
        analysis = _require_analysis()
        return analysis.act_validation.model_dump(mode="json")

    # === CONFIG ===

    @app.get("/config")
    def get_config():
        return app.state.config.model_dump()

    @app.put("/config")
    def update_config(config: KernelConfig):
        """Replace the configuration and re-analyze the loaded story, if any."""
        app.state.config = config
        story = app.state.store.story
        if story is not None:
            app.state.store.load(story, _analyze(story))
        return config.model_dump()

    return app


# Default application instance
app = create_app()
