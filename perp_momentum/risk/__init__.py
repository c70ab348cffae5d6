"""Risk: take-profit / stop-loss overlay."""

from perp_momentum.risk.overlay import RiskOverlay, compute_risk_overlay

__all__ = ["RiskOverlay", "compute_risk_overlay"]
