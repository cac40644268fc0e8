"""Geological time scale used to date specimens.

Values follow the ICS chart names. Lookups are case-insensitive and accept
the display name with or without spaces and hyphens ("Neo-Proterozoic",
"neoproterozoic", "NEO_PROTEROZOIC").
"""

import re
from enum import Enum
from typing import Optional


def _squash(text: str) -> str:
    return re.sub(r"[\s_\-]+", "", text.strip().lower())


class _TimeScaleMixin:
    """Shared display and lookup behaviour for time scale enums."""

    @property
    def display_name(self) -> str:
        return self.value

    @classmethod
    def from_text(cls, text: Optional[str]):
        if text is None:
            return None
        key = _squash(text)
        if not key:
            return None
        for member in cls:
            if key in (_squash(member.value), _squash(member.name)):
                return member
        return None


class GeologicalEra(_TimeScaleMixin, str, Enum):
    CENOZOIC = "Cenozoic"
    MESOZOIC = "Mesozoic"
    PALEOZOIC = "Paleozoic"
    PROTEROZOIC = "Proterozoic"
    ARCHEAN = "Archean"


class GeologicalPeriod(_TimeScaleMixin, str, Enum):
    QUATERNARY = "Quaternary"
    NEOGENE = "Neogene"
    PALEOGENE = "Paleogene"
    CRETACEOUS = "Cretaceous"
    JURASSIC = "Jurassic"
    TRIASSIC = "Triassic"
    PERMIAN = "Permian"
    CARBONIFEROUS = "Carboniferous"
    PENNSYLVANIAN = "Pennsylvanian"
    MISSISSIPPIAN = "Mississippian"
    DEVONIAN = "Devonian"
    SILURIAN = "Silurian"
    ORDOVICIAN = "Ordovician"
    CAMBRIAN = "Cambrian"
    NEO_PROTEROZOIC = "Neo-Proterozoic"
    MESO_PROTEROZOIC = "Meso-Proterozoic"
    PALEO_PROTEROZOIC = "Paleo-Proterozoic"
    NEO_ARCHEAN = "Neo-Archean"
    MESO_ARCHEAN = "Meso-Archean"
    PALEO_ARCHEAN = "Paleo-Archean"
    EO_ARCHEAN = "Eo-Archean"

    @property
    def era(self) -> GeologicalEra:
        return PERIOD_ERAS[self]


PERIOD_ERAS: dict[GeologicalPeriod, GeologicalEra] = {
    GeologicalPeriod.QUATERNARY: GeologicalEra.CENOZOIC,
    GeologicalPeriod.NEOGENE: GeologicalEra.CENOZOIC,
    GeologicalPeriod.PALEOGENE: GeologicalEra.CENOZOIC,
    GeologicalPeriod.CRETACEOUS: GeologicalEra.MESOZOIC,
    GeologicalPeriod.JURASSIC: GeologicalEra.MESOZOIC,
    GeologicalPeriod.TRIASSIC: GeologicalEra.MESOZOIC,
    GeologicalPeriod.PERMIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.CARBONIFEROUS: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.PENNSYLVANIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.MISSISSIPPIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.DEVONIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.SILURIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.ORDOVICIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.CAMBRIAN: GeologicalEra.PALEOZOIC,
    GeologicalPeriod.NEO_PROTEROZOIC: GeologicalEra.PROTEROZOIC,
    GeologicalPeriod.MESO_PROTEROZOIC: GeologicalEra.PROTEROZOIC,
    GeologicalPeriod.PALEO_PROTEROZOIC: GeologicalEra.PROTEROZOIC,
    GeologicalPeriod.NEO_ARCHEAN: GeologicalEra.ARCHEAN,
    GeologicalPeriod.MESO_ARCHEAN: GeologicalEra.ARCHEAN,
    GeologicalPeriod.PALEO_ARCHEAN: GeologicalEra.ARCHEAN,
    GeologicalPeriod.EO_ARCHEAN: GeologicalEra.ARCHEAN,
}

# Period names from the old single-field period list that are not periods
# on the current scale.
LEGACY_PERIODS: dict[str, GeologicalPeriod] = {
    "precambrian": GeologicalPeriod.NEO_PROTEROZOIC,
    "paleocene": GeologicalPeriod.PALEOGENE,
}


class GeologicalEpoch(_TimeScaleMixin, str, Enum):
    HOLOCENE = "Holocene"
    PLEISTOCENE = "Pleistocene"
    PLIOCENE = "Pliocene"
    MIOCENE = "Miocene"
    OLIGOCENE = "Oligocene"
    EOCENE = "Eocene"
    PALEOCENE = "Paleocene"
    LATE_CRETACEOUS = "Late Cretaceous"
    EARLY_CRETACEOUS = "Early Cretaceous"
    LATE_JURASSIC = "Late Jurassic"
    MIDDLE_JURASSIC = "Middle Jurassic"
    EARLY_JURASSIC = "Early Jurassic"
    LATE_TRIASSIC = "Late Triassic"
    MIDDLE_TRIASSIC = "Middle Triassic"
    EARLY_TRIASSIC = "Early Triassic"
    LOPINGIAN = "Lopingian"
    GUADALUPIAN = "Guadalupian"
    CISURALIAN = "Cisuralian"
    LATE_CARBONIFEROUS = "Late Carboniferous"
    EARLY_CARBONIFEROUS = "Early Carboniferous"
    LATE_PENNSYLVANIAN = "Late Pennsylvanian"
    MIDDLE_PENNSYLVANIAN = "Middle Pennsylvanian"
    EARLY_PENNSYLVANIAN = "Early Pennsylvanian"
    LATE_MISSISSIPPIAN = "Late Mississippian"
    MIDDLE_MISSISSIPPIAN = "Middle Mississippian"
    EARLY_MISSISSIPPIAN = "Early Mississippian"
    LATE_DEVONIAN = "Late Devonian"
    MIDDLE_DEVONIAN = "Middle Devonian"
    EARLY_DEVONIAN = "Early Devonian"
    PRIDOLI = "Pridoli"
    LUDLOW = "Ludlow"
    WENLOCK = "Wenlock"
    LLANDOVERY = "Llandovery"
    LATE_ORDOVICIAN = "Late Ordovician"
    MIDDLE_ORDOVICIAN = "Middle Ordovician"
    EARLY_ORDOVICIAN = "Early Ordovician"
    FURONGIAN = "Furongian"
    MIAOLINGIAN = "Miaolingian"
    SERIES_2 = "Series 2"
    TERRENEUVIAN = "Terreneuvian"


class GeologicalAge(_TimeScaleMixin, str, Enum):
    MEGHALAYAN = "Meghalayan"
    NORTHGRIPPIAN = "Northgrippian"
    GREENLANDIAN = "Greenlandian"
    UPPER_PLEISTOCENE = "Upper Pleistocene"
    CHIBANIAN = "Chibanian"
    CALABRIAN = "Calabrian"
    GELASIAN = "Gelasian"
    PIACENZIAN = "Piacenzian"
    ZANCLEAN = "Zanclean"
    MESSINIAN = "Messinian"
    TORTONIAN = "Tortonian"
    SERRAVALLIAN = "Serravallian"
    LANGHIAN = "Langhian"
    BURDIGALIAN = "Burdigalian"
    AQUITANIAN = "Aquitanian"
    CHATTIAN = "Chattian"
    RUPELIAN = "Rupelian"
    PRIABONIAN = "Priabonian"
    BARTONIAN = "Bartonian"
    LUTETIAN = "Lutetian"
    YPRESIAN = "Ypresian"
    THANETIAN = "Thanetian"
    SELANDIAN = "Selandian"
    DANIAN = "Danian"
    MAASTRICHTIAN = "Maastrichtian"
    CAMPANIAN = "Campanian"
    SANTONIAN = "Santonian"
    CONIACIAN = "Coniacian"
    TURONIAN = "Turonian"
    CENOMANIAN = "Cenomanian"
    ALBIAN = "Albian"
    APTIAN = "Aptian"
    BARREMIAN = "Barremian"
    HAUTERIVIAN = "Hauterivian"
    VALANGINIAN = "Valanginian"
    BERRIASIAN = "Berriasian"
    TITHONIAN = "Tithonian"
    KIMMERIDGIAN = "Kimmeridgian"
    OXFORDIAN = "Oxfordian"
    CALLOVIAN = "Callovian"
    BATHONIAN = "Bathonian"
    BAJOCIAN = "Bajocian"
    AALENIAN = "Aalenian"
    TOARCIAN = "Toarcian"
    PLIENSBACHIAN = "Pliensbachian"
    SINEMURIAN = "Sinemurian"
    HETTANGIAN = "Hettangian"
    RHAETIAN = "Rhaetian"
    NORIAN = "Norian"
    CARNIAN = "Carnian"
    LADINIAN = "Ladinian"
    ANISIAN = "Anisian"
    OLENEKIAN = "Olenekian"
    INDUAN = "Induan"
    CHANGHSINGIAN = "Changhsingian"
    WUCHIAPINGIAN = "Wuchiapingian"
    CAPITANIAN = "Capitanian"
    WORDIAN = "Wordian"
    ROADIAN = "Roadian"
    KUNGURIAN = "Kungurian"
    ARTINSKIAN = "Artinskian"
    SAKMARIAN = "Sakmarian"
    ASSELIAN = "Asselian"
    GZHELIAN = "Gzhelian"
    KASIMOVIAN = "Kasimovian"
    MOSCOVIAN = "Moscovian"
    BASHKIRIAN = "Bashkirian"
    SERPUKHOVIAN = "Serpukhovian"
    VISEAN = "Visean"
    TOURNAISIAN = "Tournaisian"
    FAMENNIAN = "Famennian"
    FRASNIAN = "Frasnian"
    GIVETIAN = "Givetian"
    EIFELIAN = "Eifelian"
    EMSIAN = "Emsian"
    PRAGIAN = "Pragian"
    LOCHKOVIAN = "Lochkovian"
    LUDFORDIAN = "Ludfordian"
    GORSTIAN = "Gorstian"
    HOMERIAN = "Homerian"
    SHEINWOODIAN = "Sheinwoodian"
    TELYCHIAN = "Telychian"
    AERONIAN = "Aeronian"
    RHUDDANIAN = "Rhuddanian"
    HIRNANTIAN = "Hirnantian"
    KATIAN = "Katian"
    SANDBIAN = "Sandbian"
    DARRIWILIAN = "Darriwilian"
    DAPINGIAN = "Dapingian"
    FLOIAN = "Floian"
    TREMADOCIAN = "Tremadocian"
    JIANGSHANIAN = "Jiangshanian"
    PAIBIAN = "Paibian"
    GUZHANGIAN = "Guzhangian"
    DRUMIAN = "Drumian"
    WULIUAN = "Wuliuan"
    FORTUNIAN = "Fortunian"
