"""Pipeline stages."""

from resiliencysim.stages.proxy import Client, Intermediary, PerRequestTimeout
from resiliencysim.stages.queue import AdmissionQueue
from resiliencysim.stages.resource import StochasticResourceStage
from resiliencysim.stages.stage import Stage

__all__ = [
    "AdmissionQueue",
    "Client",
    "Intermediary",
    "PerRequestTimeout",
    "Stage",
    "StochasticResourceStage",
]
