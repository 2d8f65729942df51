"""Shared fixtures: raw query rows and in-memory collaborators"""
from __future__ import annotations

from typing import Any, Dict, List

import pytest

from pharmabook.errors import GatewayQueryError
from pharmabook.favorites.storage import MemoryStorage
from pharmabook.favorites.store import KeyValueFavoritesStore


@pytest.fixture
def raw_systems() -> List[Dict[str, Any]]:
    return [
        {"id": 1, "slug": "respiratorio", "name": "Respiratório", "icon": "🫁",
         "color": "#3b82f6", "order_index": 1, "active": True},
        {"id": 2, "slug": "digestivo", "name": "Digestivo", "icon": "🍽️",
         "color": "#f59e0b", "order_index": 2, "active": True},
        {"id": 3, "slug": "pele", "name": "Pele", "icon": "🧴",
         "color": "#ec4899", "order_index": 3, "active": True},
    ]


@pytest.fixture
def raw_conditions() -> List[Dict[str, Any]]:
    return [
        {
            "id": 10,
            "slug": "asma",
            "name": "Asma",
            "short_description": "Crise de falta de ar",
            "definition": "Doença inflamatória crônica das vias aéreas.",
            "causes": ["Alérgenos", "Frio"],
            "objectives": ["Aliviar sintomas"],
            "symptoms": ["Sibilância", "Tosse"],
            "alert_signs": ["Cianose"],
            "referral_criteria": ["Crise grave"],
            "non_pharmacological": None,
            "general_guidance": ["Evitar gatilhos"],
            "active": True,
            "systems": {"slug": "respiratorio", "name": "Respiratório", "icon": "🫁"},
            "medications": [
                {"id": 100, "name": "Salbutamol", "concentration": "100 mcg",
                 "posology": "2 jatos", "duration": "Se crise", "is_mip": False},
            ],
        },
        {
            "id": 11,
            "slug": "azia",
            "name": "Azia",
            "short_description": "Queimação após refeições",
            "definition": "Sensação de queimação retroesternal.",
            "causes": None,
            "objectives": None,
            "symptoms": ["Queimação"],
            "alert_signs": None,
            "referral_criteria": None,
            "non_pharmacological": ["Fracionar refeições"],
            "general_guidance": None,
            "active": True,
            "systems": {"slug": "digestivo", "name": "Digestivo", "icon": "🍽️"},
            "medications": [
                {"id": 101, "name": "Hidróxido de alumínio", "concentration": "60 mg/mL",
                 "posology": "10 mL", "duration": "3 dias", "is_mip": True},
            ],
        },
        {
            "id": 12,
            "slug": "bronquite",
            "name": "Bronquite",
            "short_description": "Tosse em paciente asmático",
            "definition": None,
            "active": True,
            "systems": {"slug": "respiratorio", "name": "Respiratório", "icon": "🫁"},
            "medications": [],
        },
        {
            "id": 13,
            "slug": "rinite",
            "name": "Rinite",
            "short_description": "Rinite alérgica sazonal",
            "definition": "Inflamação da mucosa nasal.",
            "active": True,
            "systems": {"slug": "respiratorio", "name": "Respiratório", "icon": "🫁"},
            "medications": None,
        },
    ]


class FakeSource:
    """Stands in for the data gateway; records call order."""

    def __init__(self, systems, conditions, fail_on: str | None = None):
        self.systems = systems
        self.conditions = conditions
        self.fail_on = fail_on
        self.calls: List[str] = []

    def fetch_systems(self):
        self.calls.append("systems")
        if self.fail_on == "systems":
            raise GatewayQueryError("systems", "boom", 500)
        return self.systems

    def fetch_conditions(self):
        self.calls.append("conditions")
        if self.fail_on == "conditions":
            raise GatewayQueryError("conditions", "boom", 500)
        return self.conditions


@pytest.fixture
def source(raw_systems, raw_conditions) -> FakeSource:
    return FakeSource(raw_systems, raw_conditions)


@pytest.fixture
def favorites() -> KeyValueFavoritesStore:
    return KeyValueFavoritesStore(MemoryStorage())
