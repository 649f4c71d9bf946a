"""provermon: derived-state aggregator for a prover pipeline dashboard.

Consumes the append-only event log of a fetch -> prove -> submit worker
pipeline and maintains a monotone snapshot of its operational state:
  - Current task in flight
  - Fetch/prove/submit throughput, proving runtime and points
  - Fetch backoff countdown and fetch-in-progress state machine
  - Latest explicit prover state and process CPU/RAM
"""

__version__ = "0.1.0"
__description__ = "Derived-state aggregator and terminal dashboard for prover pipelines"

from provermon.core.aggregator import DashboardAggregator
from provermon.core.event_log import EventLog
from provermon.models.snapshot import DashboardSnapshot
from provermon.cli.app import app as cli

__all__ = ["DashboardAggregator", "DashboardSnapshot", "EventLog", "cli", "__version__"]
