from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import sys
import uvicorn

from routes.sudoku_routes import router as sudoku_router
from routes.kenken_routes import router as kenken_router
import puzzle_engine.config as config

# Configure logging
root_logger = logging.getLogger()
root_logger.setLevel(config.LOG_LEVEL)

# Clear existing handlers to avoid duplicates during reload
if root_logger.hasHandlers():
    root_logger.handlers.clear()

formatter = logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')

file_handler = logging.FileHandler(config.LOG_FILE, mode='a')
file_handler.setFormatter(formatter)
root_logger.addHandler(file_handler)

stream_handler = logging.StreamHandler()
stream_handler.setFormatter(formatter)
root_logger.addHandler(stream_handler)

logger = logging.getLogger("puzzle_main")
logger.info("Logging initialized or re-initialized")

app = FastAPI(title="Puzzle Engine", version="1.0.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=config.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(sudoku_router)
app.include_router(kenken_router)


@app.on_event("startup")
def startup_event():
    if config.is_seeded():
        logger.info(f"Generation seeded with PUZZLE_SEED={config.PUZZLE_SEED}")
    if config.is_solver_bounded():
        logger.info(f"Solver node budget: {config.SOLVER_MAX_NODES}")


@app.get("/health")
def health():
    return {"status": "ok"}


if __name__ == "__main__":
    is_frozen = getattr(sys, 'frozen', False)
    if is_frozen:
        # Pass app object directly to avoid import issues in frozen environment
        uvicorn.run(app, host=config.APP_HOST, port=config.APP_PORT, reload=False)
    else:
        uvicorn.run("main:app", host=config.APP_HOST, port=config.APP_PORT, reload=True)
