"""
FastAPI dependencies exposing process-wide state built in create_app().
"""

from fastapi import Request

from cognita_gateway.config.config import GatewaySettings
from cognita_gateway.services.chat_dispatcher import ChatDispatcher


def get_settings(request: Request) -> GatewaySettings:
    return request.app.state.settings


def get_dispatcher(request: Request) -> ChatDispatcher:
    return request.app.state.dispatcher
