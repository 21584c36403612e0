from .catalog import (
    Availability,
    BatteryOption,
    EquipmentCatalog,
    InMemoryEquipmentCatalog,
    InverterOption,
    PanelOption,
    default_catalog,
)
from .financing import FinancingOption, amortization_schedule, cash_option, loan_option
from .layout import RoofLayout, plan_roof_layout
from .optimizer import DesignResult, DesignVariant, SystemDesigner, target_system_size
from .requirements import (
    Budget,
    DesignGoals,
    DesignPreferences,
    DesignRequirements,
    RoofConstraints,
    UtilityRates,
    requirements_from_dict,
)
from .scoring import DesignScore, reliability_score, score_variant

__all__ = [
    "Availability",
    "BatteryOption",
    "Budget",
    "DesignGoals",
    "DesignPreferences",
    "DesignRequirements",
    "DesignResult",
    "DesignScore",
    "DesignVariant",
    "EquipmentCatalog",
    "FinancingOption",
    "InMemoryEquipmentCatalog",
    "InverterOption",
    "PanelOption",
    "RoofConstraints",
    "RoofLayout",
    "SystemDesigner",
    "UtilityRates",
    "amortization_schedule",
    "cash_option",
    "default_catalog",
    "loan_option",
    "plan_roof_layout",
    "reliability_score",
    "requirements_from_dict",
    "score_variant",
    "target_system_size",
]
