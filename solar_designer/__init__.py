from .calendar_utils import MONTH_LENGTHS, MONTH_NAMES, days_in_month
from .errors import InfeasibleDesignError, ValidationError
from .simulation.financial import FinancialOptions
from .simulation.models import (
    InverterType,
    Location,
    ModuleType,
    ProductionResult,
    SystemSpecification,
    TrackingType,
    WeatherMonth,
    weather_from_records,
)
from .simulation.production import ProductionSimulator
from .design.catalog import InMemoryEquipmentCatalog, default_catalog
from .design.optimizer import DesignResult, DesignVariant, SystemDesigner
from .design.requirements import DesignRequirements, requirements_from_dict
from .result_builder import ResultBuilder
from .application import DesignApplication

__all__ = [
    "MONTH_LENGTHS",
    "MONTH_NAMES",
    "days_in_month",
    "InfeasibleDesignError",
    "ValidationError",
    "FinancialOptions",
    "InverterType",
    "Location",
    "ModuleType",
    "ProductionResult",
    "SystemSpecification",
    "TrackingType",
    "WeatherMonth",
    "weather_from_records",
    "ProductionSimulator",
    "InMemoryEquipmentCatalog",
    "default_catalog",
    "DesignResult",
    "DesignVariant",
    "SystemDesigner",
    "DesignRequirements",
    "requirements_from_dict",
    "ResultBuilder",
    "DesignApplication",
]
