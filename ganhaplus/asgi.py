"""ASGI entrypoint: uvicorn ganhaplus.asgi:app"""
from ganhaplus.main import create_app

app = create_app()
