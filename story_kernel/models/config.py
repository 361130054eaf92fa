"""Kernel configuration."""

from pydantic import BaseModel


class RunnerConfig(BaseModel):
    """Configuration for the Simulation Runner."""

    halt_on_rejection: bool = False         # Stop at the first rejected act


class LocationValidatorConfig(BaseModel):
    """Configuration for the Location Graph Validator."""

    check_reachability: bool = False        # BFS from initial positions
    report_disconnected_groups: bool = False  # Info issue per cut-off multi-location group


class KernelConfig(BaseModel):
    runner: RunnerConfig = RunnerConfig()
    locations: LocationValidatorConfig = LocationValidatorConfig()
