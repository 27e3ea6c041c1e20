# backend/indovendor/api/v1/api_router.py
"""
Este archivo contiene el router principal de la API.

Se encarga de registrar y configurar todos los routers por dominio de negocio.
"""

from fastapi import APIRouter

from indovendor.api.v1.endpoints import (
    auth,
    categories,
    products,
    vendor,
    profile,
)

# ========================================
# CONFIGURACIÓN DEL ROUTER PRINCIPAL
# ========================================

api_router = APIRouter()

# ========================================
# REGISTRO DE ROUTERS POR DOMINIO DE NEGOCIO
# ========================================

# ROUTER DE AUTENTICACIÓN
# Registro, login, tokens y contraseñas
api_router.include_router(
    auth.router,
    prefix="/auth",                 # Prefijo: /api/auth
    tags=["Auth"]
)

# ROUTER DE CATEGORÍAS
# Catálogo público, administración y categorías de cada vendedor
api_router.include_router(
    categories.router,
    prefix="/categories",
    tags=["Categories"]
)

# ROUTER DE PRODUCTOS
# Catálogo de productos, búsquedas, operaciones masivas e imágenes
api_router.include_router(
    products.router,
    prefix="/products",
    tags=["Products"]
)

# ROUTER DEL VENDEDOR
# Cobertura, perfil de negocio, documentos y verificación
api_router.include_router(
    vendor.router,
    prefix="/vendor",
    tags=["Vendor"]
)

# ROUTER DEL PERFIL
# Perfil personal, avatar y selectores de regiones
api_router.include_router(
    profile.router,
    prefix="/profile",
    tags=["Profile"]
)
