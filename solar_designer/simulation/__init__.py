from .financial import FinancialOptions, analyze
from .models import (
    EfficiencyBreakdown,
    FinancialAnalysis,
    InverterType,
    Location,
    ModuleType,
    MonthlyProduction,
    ProductionResult,
    SimulationInput,
    SystemSpecification,
    TrackingType,
    WeatherMonth,
    weather_from_records,
)
from .production import ProductionSimulator

__all__ = [
    "EfficiencyBreakdown",
    "FinancialAnalysis",
    "FinancialOptions",
    "InverterType",
    "Location",
    "ModuleType",
    "MonthlyProduction",
    "ProductionResult",
    "ProductionSimulator",
    "SimulationInput",
    "SystemSpecification",
    "TrackingType",
    "WeatherMonth",
    "analyze",
    "weather_from_records",
]
