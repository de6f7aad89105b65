"""
Simulation harness for exercising relationship progression
"""

from .courtship import CourtshipSimulation, SimulationResult, run_courtship_simulation

__all__ = ["CourtshipSimulation", "SimulationResult", "run_courtship_simulation"]
