"""
Equipment catalog: panel, inverter and battery options plus filterable lookups.

Option records are frozen dataclasses so that a catalog can be shared by
concurrent design calls without copying. :class:`InMemoryEquipmentCatalog`
is the reference implementation of the :class:`EquipmentCatalog` protocol;
the persistence layer produces one from database rows.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from enum import Enum
from typing import Any, Iterable, List, Mapping, Optional, Protocol, Sequence, Tuple, Type, TypeVar

from ..simulation.models import InverterType, ModuleType


class Availability(str, Enum):
    IN_STOCK = "in-stock"
    LIMITED = "limited"
    DISCONTINUED = "discontinued"


T = TypeVar("T")


def _from_mapping(cls: Type[T], data: Mapping[str, Any]) -> T:
    known = {f.name for f in fields(cls)}  # type: ignore[arg-type]
    values = {key: value for key, value in data.items() if key in known}
    if "certifications" in values and values["certifications"] is not None:
        values["certifications"] = tuple(values["certifications"])
    return cls(**values)


@dataclass(frozen=True)
class PanelOption:
    """
    PV module available for a design.

    Attributes:
        id: Catalog identifier (slug).
        manufacturer: Manufacturer name.
        model: Model designation.
        panel_type: Cell technology.
        wattage: STC rating per module (W).
        efficiency: Module efficiency (%).
        length_mm, width_mm, thickness_mm: Module dimensions.
        weight_kg: Module weight.
        temperature_coefficient: Pmax coefficient (%/°C).
        performance_warranty_years: Output guarantee term.
        product_warranty_years: Workmanship guarantee term.
        certifications: Certification labels.
        price_per_watt: Equipment price (USD/W).
        availability: Stock status.
        tier: Bloomberg-style manufacturer tier (1 best).
    """

    id: str
    manufacturer: str
    model: str
    panel_type: ModuleType
    wattage: float
    efficiency: float
    price_per_watt: float
    length_mm: float = 2000.0
    width_mm: float = 1000.0
    thickness_mm: float = 35.0
    weight_kg: float = 22.0
    temperature_coefficient: float = -0.35
    performance_warranty_years: int = 25
    product_warranty_years: int = 12
    certifications: Tuple[str, ...] = ()
    availability: Availability = Availability.IN_STOCK
    tier: int = 1

    def __post_init__(self) -> None:
        object.__setattr__(self, "panel_type", ModuleType(self.panel_type))
        object.__setattr__(self, "availability", Availability(self.availability))

    @property
    def name(self) -> str:
        return f"{self.manufacturer} {self.model}"

    @property
    def area_m2(self) -> float:
        return (self.length_mm / 1000.0) * (self.width_mm / 1000.0)

    @property
    def value_ratio(self) -> float:
        """Efficiency per dollar-per-watt, used by the balanced selection."""
        return self.efficiency / self.price_per_watt

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "PanelOption":
        return _from_mapping(cls, data)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["panel_type"] = self.panel_type.value
        data["availability"] = self.availability.value
        data["certifications"] = list(self.certifications)
        return data


@dataclass(frozen=True)
class InverterOption:
    """
    Inverter available for a design.

    ``capacity_w`` is the AC rating of one unit; micro-inverters are rated
    per panel. Efficiencies are percentages.
    """

    id: str
    manufacturer: str
    model: str
    inverter_type: InverterType
    capacity_w: float
    cec_efficiency: float
    price_per_watt: float
    peak_efficiency: Optional[float] = None
    euro_efficiency: Optional[float] = None
    input_voltage_min: Optional[float] = None
    input_voltage_max: Optional[float] = None
    mppt_channels: int = 1
    monitoring: bool = True
    warranty_years: int = 10
    availability: Availability = Availability.IN_STOCK

    def __post_init__(self) -> None:
        object.__setattr__(self, "inverter_type", InverterType(self.inverter_type))
        object.__setattr__(self, "availability", Availability(self.availability))

    @property
    def name(self) -> str:
        return f"{self.manufacturer} {self.model}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "InverterOption":
        return _from_mapping(cls, data)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["inverter_type"] = self.inverter_type.value
        data["availability"] = self.availability.value
        return data


@dataclass(frozen=True)
class BatteryOption:
    """Home storage unit; ``capacity_kwh`` is usable energy per unit."""

    id: str
    manufacturer: str
    model: str
    capacity_kwh: float
    power_kw: float
    price_per_kwh: float
    technology: str = "lithium-ion"
    round_trip_efficiency: float = 90.0
    cycle_life: int = 4000
    warranty_years: int = 10
    warranty_cycles: Optional[int] = None
    warranty_capacity_pct: Optional[float] = None
    weight_kg: Optional[float] = None
    availability: Availability = Availability.IN_STOCK

    def __post_init__(self) -> None:
        object.__setattr__(self, "availability", Availability(self.availability))

    @property
    def name(self) -> str:
        return f"{self.manufacturer} {self.model}"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "BatteryOption":
        return _from_mapping(cls, data)

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["availability"] = self.availability.value
        return data


class EquipmentCatalog(Protocol):
    """Read-only, filterable source of equipment options."""

    def get_panels(
        self,
        panel_type: Optional[str] = None,
        min_wattage: Optional[float] = None,
        max_wattage: Optional[float] = None,
        min_efficiency: Optional[float] = None,
        max_price_per_watt: Optional[float] = None,
        tier: Optional[int] = None,
        availability: Optional[str] = None,
    ) -> List[PanelOption]:
        ...

    def get_inverters(
        self,
        inverter_type: Optional[str] = None,
        min_capacity: Optional[float] = None,
        max_capacity: Optional[float] = None,
        min_efficiency: Optional[float] = None,
        availability: Optional[str] = None,
    ) -> List[InverterOption]:
        ...

    def get_batteries(
        self,
        technology: Optional[str] = None,
        min_capacity: Optional[float] = None,
        max_capacity: Optional[float] = None,
        availability: Optional[str] = None,
    ) -> List[BatteryOption]:
        ...


@dataclass(frozen=True)
class InMemoryEquipmentCatalog:
    """
    Catalog backed by tuples of option records.

    Filters left as ``None`` are ignored; results keep insertion order.
    """

    panels: Tuple[PanelOption, ...] = ()
    inverters: Tuple[InverterOption, ...] = ()
    batteries: Tuple[BatteryOption, ...] = ()

    @classmethod
    def from_iterables(
        cls,
        panels: Iterable[PanelOption] = (),
        inverters: Iterable[InverterOption] = (),
        batteries: Iterable[BatteryOption] = (),
    ) -> "InMemoryEquipmentCatalog":
        return cls(tuple(panels), tuple(inverters), tuple(batteries))

    def get_panels(
        self,
        panel_type: Optional[str] = None,
        min_wattage: Optional[float] = None,
        max_wattage: Optional[float] = None,
        min_efficiency: Optional[float] = None,
        max_price_per_watt: Optional[float] = None,
        tier: Optional[int] = None,
        availability: Optional[str] = None,
    ) -> List[PanelOption]:
        result = []
        for panel in self.panels:
            if panel_type is not None and panel.panel_type != ModuleType(panel_type):
                continue
            if min_wattage is not None and panel.wattage < min_wattage:
                continue
            if max_wattage is not None and panel.wattage > max_wattage:
                continue
            if min_efficiency is not None and panel.efficiency < min_efficiency:
                continue
            if max_price_per_watt is not None and panel.price_per_watt > max_price_per_watt:
                continue
            if tier is not None and panel.tier != tier:
                continue
            if availability is not None and panel.availability != Availability(availability):
                continue
            result.append(panel)
        return result

    def get_inverters(
        self,
        inverter_type: Optional[str] = None,
        min_capacity: Optional[float] = None,
        max_capacity: Optional[float] = None,
        min_efficiency: Optional[float] = None,
        availability: Optional[str] = None,
    ) -> List[InverterOption]:
        result = []
        for inverter in self.inverters:
            if inverter_type is not None and inverter.inverter_type != InverterType(inverter_type):
                continue
            if min_capacity is not None and inverter.capacity_w < min_capacity:
                continue
            if max_capacity is not None and inverter.capacity_w > max_capacity:
                continue
            if min_efficiency is not None and inverter.cec_efficiency < min_efficiency:
                continue
            if availability is not None and inverter.availability != Availability(availability):
                continue
            result.append(inverter)
        return result

    def get_batteries(
        self,
        technology: Optional[str] = None,
        min_capacity: Optional[float] = None,
        max_capacity: Optional[float] = None,
        availability: Optional[str] = None,
    ) -> List[BatteryOption]:
        result = []
        for battery in self.batteries:
            if technology is not None and battery.technology != technology:
                continue
            if min_capacity is not None and battery.capacity_kwh < min_capacity:
                continue
            if max_capacity is not None and battery.capacity_kwh > max_capacity:
                continue
            if availability is not None and battery.availability != Availability(availability):
                continue
            result.append(battery)
        return result


DEFAULT_PANELS: Sequence[PanelOption] = (
    PanelOption(
        id="rec-alpha-pure-405",
        manufacturer="REC Solar",
        model="Alpha Pure 405W",
        panel_type=ModuleType.MONOCRYSTALLINE,
        wattage=405,
        efficiency=21.7,
        price_per_watt=0.65,
        length_mm=2009, width_mm=1016, thickness_mm=32,
        weight_kg=22.0,
        temperature_coefficient=-0.26,
        performance_warranty_years=25, product_warranty_years=20,
        certifications=("IEC 61215", "IEC 61730", "UL 61730"),
    ),
    PanelOption(
        id="sunpower-maxeon-3-400",
        manufacturer="SunPower",
        model="Maxeon 3 400W",
        panel_type=ModuleType.MONOCRYSTALLINE,
        wattage=400,
        efficiency=22.6,
        price_per_watt=0.85,
        length_mm=2067, width_mm=1046, thickness_mm=40,
        weight_kg=24.5,
        temperature_coefficient=-0.29,
        performance_warranty_years=25, product_warranty_years=25,
        certifications=("IEC 61215", "IEC 61730", "UL 61730"),
    ),
    PanelOption(
        id="qcells-qpeak-duo-l-g10-415",
        manufacturer="Q CELLS",
        model="Q.PEAK DUO L-G10.3 415W",
        panel_type=ModuleType.MONOCRYSTALLINE,
        wattage=415,
        efficiency=20.6,
        price_per_watt=0.55,
        length_mm=2108, width_mm=1048, thickness_mm=32,
        weight_kg=22.5,
        temperature_coefficient=-0.34,
        certifications=("IEC 61215", "IEC 61730"),
    ),
    PanelOption(
        id="jinko-tiger-neo-420",
        manufacturer="JinkoSolar",
        model="Tiger Neo 420W",
        panel_type=ModuleType.MONOCRYSTALLINE,
        wattage=420,
        efficiency=21.25,
        price_per_watt=0.50,
        length_mm=2094, width_mm=1038, thickness_mm=30,
        weight_kg=21.5,
        temperature_coefficient=-0.30,
        certifications=("IEC 61215", "IEC 61730"),
    ),
    PanelOption(
        id="canadian-solar-hiku6-410",
        manufacturer="Canadian Solar",
        model="HiKu6 410W",
        panel_type=ModuleType.MONOCRYSTALLINE,
        wattage=410,
        efficiency=20.7,
        price_per_watt=0.48,
        length_mm=2108, width_mm=1048, thickness_mm=32,
        weight_kg=22.0,
        temperature_coefficient=-0.35,
        certifications=("IEC 61215", "IEC 61730"),
    ),
    PanelOption(
        id="trina-honey-m-330-poly",
        manufacturer="Trina Solar",
        model="Honey PD05 330W",
        panel_type=ModuleType.POLYCRYSTALLINE,
        wattage=330,
        efficiency=17.0,
        price_per_watt=0.40,
        length_mm=1960, width_mm=992, thickness_mm=40,
        weight_kg=22.5,
        temperature_coefficient=-0.39,
        performance_warranty_years=25, product_warranty_years=10,
        tier=2,
    ),
    PanelOption(
        id="first-solar-series-6-460",
        manufacturer="First Solar",
        model="Series 6 Plus 460W",
        panel_type=ModuleType.THIN_FILM,
        wattage=460,
        efficiency=18.7,
        price_per_watt=0.45,
        length_mm=2009, width_mm=1232, thickness_mm=49,
        weight_kg=35.0,
        temperature_coefficient=-0.28,
        performance_warranty_years=30, product_warranty_years=12,
    ),
)

DEFAULT_INVERTERS: Sequence[InverterOption] = (
    InverterOption(
        id="solaredge-hd-wave-7600",
        manufacturer="SolarEdge",
        model="HD-Wave 7600W",
        inverter_type=InverterType.POWER_OPTIMIZER,
        capacity_w=7600,
        peak_efficiency=99.0, cec_efficiency=97.5, euro_efficiency=98.0,
        input_voltage_min=125, input_voltage_max=1000,
        mppt_channels=1,
        warranty_years=12,
        price_per_watt=0.35,
    ),
    InverterOption(
        id="enphase-iq8plus",
        manufacturer="Enphase",
        model="IQ8+ Microinverter",
        inverter_type=InverterType.MICRO,
        capacity_w=290,
        peak_efficiency=97.0, cec_efficiency=96.5, euro_efficiency=96.8,
        input_voltage_min=16, input_voltage_max=60,
        mppt_channels=1,
        warranty_years=25,
        price_per_watt=0.45,
    ),
    InverterOption(
        id="sma-sunny-boy-7700",
        manufacturer="SMA",
        model="Sunny Boy 7.7kW",
        inverter_type=InverterType.STRING,
        capacity_w=7700,
        peak_efficiency=98.0, cec_efficiency=97.0, euro_efficiency=97.5,
        input_voltage_min=100, input_voltage_max=1000,
        mppt_channels=2,
        warranty_years=10,
        price_per_watt=0.25,
    ),
    InverterOption(
        id="fronius-primo-8.2",
        manufacturer="Fronius",
        model="Primo 8.2kW",
        inverter_type=InverterType.STRING,
        capacity_w=8200,
        peak_efficiency=98.1, cec_efficiency=97.0, euro_efficiency=97.3,
        input_voltage_min=80, input_voltage_max=1000,
        mppt_channels=2,
        warranty_years=10,
        price_per_watt=0.28,
    ),
)

DEFAULT_BATTERIES: Sequence[BatteryOption] = (
    BatteryOption(
        id="tesla-powerwall-2",
        manufacturer="Tesla",
        model="Powerwall 2",
        capacity_kwh=13.5,
        power_kw=5.0,
        round_trip_efficiency=90,
        cycle_life=4000,
        warranty_years=10, warranty_cycles=4000, warranty_capacity_pct=70,
        weight_kg=114,
        price_per_kwh=550,
        availability=Availability.LIMITED,
    ),
    BatteryOption(
        id="lg-resu10h",
        manufacturer="LG Chem",
        model="RESU10H",
        capacity_kwh=9.8,
        power_kw=5.0,
        round_trip_efficiency=95,
        cycle_life=6000,
        warranty_years=10, warranty_cycles=6000, warranty_capacity_pct=70,
        weight_kg=98,
        price_per_kwh=600,
    ),
    BatteryOption(
        id="enphase-iq-battery-10",
        manufacturer="Enphase",
        model="IQ Battery 10",
        capacity_kwh=10.08,
        power_kw=3.84,
        round_trip_efficiency=89,
        cycle_life=4000,
        warranty_years=10, warranty_cycles=4000, warranty_capacity_pct=70,
        weight_kg=105,
        price_per_kwh=700,
    ),
)


def default_catalog() -> InMemoryEquipmentCatalog:
    """Catalog seeded with common residential equipment."""
    return InMemoryEquipmentCatalog.from_iterables(DEFAULT_PANELS, DEFAULT_INVERTERS, DEFAULT_BATTERIES)
