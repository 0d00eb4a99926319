"""Tenant and property matching profiles."""

from .models import PropertyMatchProfile, TenantProfile

__all__ = ["PropertyMatchProfile", "TenantProfile"]
