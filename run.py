#!/usr/bin/env python3
"""Local development server runner for the ask relay."""
import os

import uvicorn

if __name__ == "__main__":
    uvicorn.run(
        "app.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=True,  # Auto-reload on code changes
        log_config=None,  # Use our custom JSON logging
    )
