# -----------------------------------------------------------------------------
# Author: Frank Campbell Bogle
# Created: 2026-02-12
# Description: dependencies.py
# -----------------------------------------------------------------------------
from api.AppContainer import get_app_container
from config.Config import Config
from embedding.HSKEmbeddingGateway import HSKEmbeddingGateway
from services.HSKContextLedger import HSKContextLedger
from services.HSKHealthService import HSKHealthService
from services.HSKQueryService import HSKQueryService
from services.HSKReindexService import HSKReindexService
from services.HSKSearchService import HSKSearchService
from services.HSKStatsService import HSKStatsService


def get_cfg() -> Config:
    return get_app_container().cfg

def get_query_service() -> HSKQueryService:
    # use the singleton service from the container
    return get_app_container().query_service

def get_search_service() -> HSKSearchService:
    return get_app_container().search_service

def get_ledger() -> HSKContextLedger:
    return get_app_container().ledger

def get_reindex_service() -> HSKReindexService:
    return get_app_container().reindex_service

def get_stats_service() -> HSKStatsService:
    return get_app_container().stats_service

def get_health_service() -> HSKHealthService:
    return get_app_container().health_service

def get_gateway() -> HSKEmbeddingGateway:
    return get_app_container().gateway
