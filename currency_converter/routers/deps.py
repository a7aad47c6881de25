"""FastAPI dependencies resolving the per-app services built in create_app."""

from fastapi import Request

from currency_converter.core.config import Settings
from currency_converter.db.dal import Database
from currency_converter.services.conversion import ConversionHandler


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_db(request: Request) -> Database:
    return request.app.state.db


def get_conversion_handler(request: Request) -> ConversionHandler:
    return request.app.state.conversion_handler
