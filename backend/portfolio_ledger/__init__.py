"""Portfolio ledger: positions, reports, alerts and CSV backup for a trade log."""

from .alerts import AlertEvaluation, evaluate_alerts
from .bands import Bands, bands
from .csv_codec import decode_ledger, encode_ledger
from .errors import InvalidInput, LedgerError, PriceLookupError
from .models import AlertConfig, InstrumentMaster, Ledger, Position, PositionView, PriceObservation, Trade
from .positions import aggregate, value_positions
from .reports import Reports, reports
from .service import LedgerService
from .symbols import normalize_symbol

__all__ = [
    "AlertConfig",
    "AlertEvaluation",
    "Bands",
    "InstrumentMaster",
    "InvalidInput",
    "Ledger",
    "LedgerError",
    "LedgerService",
    "Position",
    "PositionView",
    "PriceLookupError",
    "PriceObservation",
    "Reports",
    "Trade",
    "aggregate",
    "bands",
    "decode_ledger",
    "encode_ledger",
    "evaluate_alerts",
    "normalize_symbol",
    "reports",
    "value_positions",
]
