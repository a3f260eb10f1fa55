"""
Application entry point - FastAPI app factory and command line runner.
"""
