# =====================================================================
# ENUMERACIONES DEL SISTEMA
# =====================================================================

from __future__ import annotations

from typing import Literal

# =========================================================
# ENUMERACIONES PRINCIPALES
# =========================================================

"""
Enumeraciones principales que definen los tipos y estados del sistema.
Estas enumeraciones deben coincidir con las definiciones en foyer/models/base.py.
"""

# Roles de las cuentas del back office
UserRole = Literal["superadmin", "admin", "staff"]

# Stagiaire interno (alojado) o externo (solo comidas)
ResidentType = Literal["internal", "external"]

ResidentGender = Literal["male", "female"]

# Códigos de ciclo; 'external' es implícito para los externos
CycleCode = Literal["sep", "nov", "fev", "external"]

PaymentStatus = Literal["paid", "exempt"]

RoomGender = Literal["boys", "girls", "mixed"]

RoomType = Literal["simple", "double", "triple", "quadruple", "accessible", "standard"]

# Estado derivado de la ocupación, nunca se asigna a mano
RoomStatus = Literal["available", "occupied"]

StaffStatus = Literal["active", "inactive"]

Department = Literal[
    "Administration", "Ressources Humaines", "Sécurité",
    "Restauration", "Technique", "Hébergement",
]

Weekday = Literal["monday", "tuesday", "wednesday", "thursday", "friday", "saturday", "sunday"]
