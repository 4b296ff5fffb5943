"""
Authorization core: validators, cache, remote client, usage tracking and facade
"""
from a11ytool.core.authorizer import Authorizer
from a11ytool.core.entitlement_client import EntitlementClient
from a11ytool.core.result_cache import ResultCache
from a11ytool.core.usage_tracker import UsageTracker


__all__ = [
    'Authorizer',
    'EntitlementClient',
    'ResultCache',
    'UsageTracker'
]
