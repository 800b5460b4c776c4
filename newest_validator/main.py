from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from newest_validator.config import RunConfig
from newest_validator.logs import configure_logging
from newest_validator.models import ValidateRequest, ValidateResponse
from newest_validator.runner import run_validation


@asynccontextmanager
async def lifespan(app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Newest Listing Order Validator", lifespan=lifespan)


@app.get("/healthz")
async def health_check():
    return {"status": "ok"}


@app.post("/validate", response_model=ValidateResponse)
async def validate_listing(request: ValidateRequest):
    # Validate URL scheme
    if request.url.scheme not in ["http", "https"]:
        raise HTTPException(status_code=400, detail="Only http and https schemes are supported.")

    config = RunConfig(url=str(request.url), target=request.target, static=request.static)
    report = await run_validation(config)
    return ValidateResponse(report=report)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
