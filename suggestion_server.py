"""
HTTP front for the 2048 move suggestion service.

    POST /prompt  {"boardValues": [[...], ...]}  -> {"recommended": ..., "reasoning": ...}
    GET  /health                                  -> {"ok": true}
"""

import json
import os

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

import suggestion_service

INVALID_BOARD_ERROR = 'Invalid request: body must contain boardValues as a 4x4 array of numbers or null'
UPSTREAM_ERROR = 'Failed to generate prompt response'


def create_app() -> FastAPI:
    app = FastAPI(title="2048 suggestion service")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/health")
    def health():
        return {"ok": True}

    @app.post("/prompt")
    async def prompt(request: Request):
        try:
            body = await request.json()
        except (json.JSONDecodeError, UnicodeDecodeError):
            body = None

        board_values = body.get("boardValues") if isinstance(body, dict) else None
        if not suggestion_service.is_board_values(board_values):
            return JSONResponse(status_code=400, content={"error": INVALID_BOARD_ERROR})

        try:
            response = await run_in_threadpool(suggestion_service.prompt_model, board_values)
            parsed = suggestion_service.sanitize_and_parse_json(response)
        except Exception as e:
            print(f"❌ Error generating prompt response: {e}")
            return JSONResponse(status_code=500, content={"error": UPSTREAM_ERROR})

        return JSONResponse(status_code=200, content=parsed)

    return app


app = create_app()


if __name__ == "__main__":
    import argparse
    import uvicorn

    parser = argparse.ArgumentParser(description='Serve 2048 move suggestions')
    parser.add_argument('--host', type=str, default='0.0.0.0', help='Interface to bind')
    parser.add_argument('--port', type=int, default=int(os.environ.get('PORT', 3000)),
                        help='Port to listen on (default: $PORT or 3000)')

    args = parser.parse_args()

    print(f"Server running at http://localhost:{args.port}")
    uvicorn.run(app, host=args.host, port=args.port)
