#!/usr/bin/env python3
"""
Simple launcher script for the Digital Twin Scheduler API.
Run this from the root directory to start the application.
"""

import uvicorn

if __name__ == "__main__":
    print("🚀 Starting Digital Twin Scheduler API with auto-reload...")
    print("📖 API Documentation: http://localhost:8000/docs")
    print("🔍 Health Check: http://localhost:8000/health")
    print("🛑 Press Ctrl+C to stop the server")
    print("-" * 50)

    uvicorn.run(
        "digital_twin.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_dirs=["digital_twin"],
        log_level="info"
    )
