"""
FastAPI application entry point.

Configures and creates the FastAPI application with:
- Service lifecycle management
- Exception handlers
- Router mounting
"""

from dotenv import load_dotenv
from fastapi import FastAPI

# Load environment variables first
load_dotenv()

from concept_graph import __version__  # noqa: E402
from concept_graph.core.config import get_settings  # noqa: E402
from concept_graph.core.logging import configure_logging  # noqa: E402

configure_logging(get_settings().log_level)

# Import application components
from concept_graph.api.errors import register_exception_handlers  # noqa: E402
from concept_graph.api.routers import (  # noqa: E402
    concepts_router,
    health_router,
    link_names_router,
    links_router,
    proposals_router,
)
from concept_graph.services import services_lifespan  # noqa: E402

# Create FastAPI application with service lifecycle management
app = FastAPI(
    title="Concept Link Graph",
    description="Typed, directed links between knowledge-base concepts",
    version=__version__,
    lifespan=services_lifespan,
)

# Register exception handlers
register_exception_handlers(app)

# Mount API routers
app.include_router(health_router)
app.include_router(concepts_router)
app.include_router(links_router)
app.include_router(link_names_router)
app.include_router(proposals_router)


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("concept_graph.main:app", host="127.0.0.1", port=8000, reload=True)
