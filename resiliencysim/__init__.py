"""resiliencysim: discrete-event simulation of request pipelines under stress.

A trial sends a stream of requests through a chain of stages (client,
intermediary, optional resilience stages, a stochastic resource), records
per-tick statistics and reduces them into one CSV row per sample.

The library is silent by default. See ``resiliencysim.logging_config``.
"""

import logging

logging.getLogger("resiliencysim").addHandler(logging.NullHandler())

from resiliencysim.config import TrialSettings  # noqa: E402
from resiliencysim.core import Event, SimFuture, Simulation, SimulationContext  # noqa: E402
from resiliencysim.errors import ConfigurationLookupError, SimulationAbort, StageFailure  # noqa: E402
from resiliencysim.events import EventMetadata, Request, ResponseStatus, ResponseTime  # noqa: E402
from resiliencysim.experiment import (  # noqa: E402
    ExperimentRunner,
    SlimRow,
    TrialResult,
    get_slim_rows,
    run_batch,
    run_instance,
)
from resiliencysim.instrumentation import Series, StatsRecorder  # noqa: E402
from resiliencysim.logging_config import (  # noqa: E402
    configure_from_env,
    disable_logging,
    enable_console_logging,
    enable_file_logging,
    set_level,
    set_module_level,
)
from resiliencysim.models import MODELS, Model, ModelKind, get_model  # noqa: E402
from resiliencysim.random_source import RandomSource  # noqa: E402
from resiliencysim.scenarios import INJECTORS, InjectorKind, Scenario, get_injector  # noqa: E402

__all__ = [
    "ConfigurationLookupError",
    "Event",
    "EventMetadata",
    "ExperimentRunner",
    "INJECTORS",
    "InjectorKind",
    "MODELS",
    "Model",
    "ModelKind",
    "RandomSource",
    "Request",
    "ResponseStatus",
    "ResponseTime",
    "Scenario",
    "Series",
    "SimFuture",
    "Simulation",
    "SimulationAbort",
    "SimulationContext",
    "SlimRow",
    "StageFailure",
    "StatsRecorder",
    "TrialResult",
    "TrialSettings",
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "get_injector",
    "get_model",
    "get_slim_rows",
    "run_batch",
    "run_instance",
    "set_level",
    "set_module_level",
]
