"""Core simulation engine components."""

from resiliencysim.core.callback_entity import CallbackEntity
from resiliencysim.core.clock import Clock
from resiliencysim.core.context import ArrivalProcess, Pacing, SimulationContext
from resiliencysim.core.entity import Entity, SimReturn, SimYield
from resiliencysim.core.event import Event, ProcessContinuation
from resiliencysim.core.event_heap import EventHeap
from resiliencysim.core.sim_future import SimFuture, any_of
from resiliencysim.core.simulation import RequestDriver, RequestSource, Simulation

__all__ = [
    "ArrivalProcess",
    "CallbackEntity",
    "Clock",
    "Entity",
    "Event",
    "EventHeap",
    "Pacing",
    "ProcessContinuation",
    "RequestDriver",
    "RequestSource",
    "SimFuture",
    "SimReturn",
    "SimYield",
    "Simulation",
    "SimulationContext",
    "any_of",
]
