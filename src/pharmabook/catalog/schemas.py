"""Data schemas for raw query rows and the derived catalog"""
from __future__ import annotations

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


# --- Raw rows, as returned by the data service ---
class RawSystem(BaseModel):
    slug: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    order_index: Optional[int] = None


class RawConditionSystem(BaseModel):
    """Owning system embedded in a condition row."""
    slug: str
    name: str
    icon: Optional[str] = None


class RawMedication(BaseModel):
    name: Optional[str] = None
    concentration: Optional[str] = None
    posology: Optional[str] = None
    duration: Optional[str] = None
    is_mip: Optional[bool] = False


class RawCondition(BaseModel):
    slug: str
    name: str
    short_description: Optional[str] = None
    definition: Optional[str] = None
    causes: Optional[List[str]] = None
    objectives: Optional[List[str]] = None
    symptoms: Optional[List[str]] = None
    alert_signs: Optional[List[str]] = None
    referral_criteria: Optional[List[str]] = None
    non_pharmacological: Optional[List[str]] = None
    general_guidance: Optional[List[str]] = None
    # embedded relations keep the table names used in the select
    system: RawConditionSystem = Field(alias="systems")
    medications: Optional[List[RawMedication]] = None


# --- Derived, view-ready structures ---
class System(BaseModel):
    id: str
    name: str
    icon: Optional[str] = None
    color: Optional[str] = None
    count: int = Field(default=0, ge=0)


class ConditionSummary(BaseModel):
    id: str
    name: str
    desc: str = ""
    system: str


class Medication(BaseModel):
    name: Optional[str] = None
    concentration: Optional[str] = None
    posology: Optional[str] = None
    duration: Optional[str] = None
    mip: bool = False


class ConditionDetail(BaseModel):
    """Full clinical record for one condition, keyed by condition id."""
    model_config = ConfigDict(populate_by_name=True)

    system: str = Field(description="Display name of the owning system")
    name: str
    definition: str = ""
    causes: List[str] = Field(default_factory=list)
    objectives: List[str] = Field(default_factory=list)
    symptoms: List[str] = Field(default_factory=list)
    alert_signs: List[str] = Field(default_factory=list, alias="alertSigns")
    referral_criteria: List[str] = Field(default_factory=list, alias="referralCriteria")
    medications: List[Medication] = Field(default_factory=list)
    non_pharmacological: List[str] = Field(default_factory=list, alias="nonPharmacological")
    general_guidance: List[str] = Field(default_factory=list, alias="generalGuidance")


class Catalog(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    systems: List[System] = Field(default_factory=list)
    conditions: List[ConditionSummary] = Field(default_factory=list)
    conditions_data: Dict[str, ConditionDetail] = Field(default_factory=dict, alias="conditionsData")
