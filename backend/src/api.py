import asyncio
import logging
import functools
import os
from concurrent.futures import ThreadPoolExecutor
from typing import Dict, List, Optional

import sentry_sdk
from fastapi import FastAPI, Response
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field
from sentry_sdk.integrations.aws_lambda import AwsLambdaIntegration

from hunter_analysis.analyze import analyze
from hunter_analysis.errors import AnalysisError
from report import Encounter, Fight, Source

SENTRY_ENABLED = os.environ.get("AWS_EXECUTION_ENV") is not None
if SENTRY_ENABLED:
    sentry_sdk.init(
        dsn=os.environ.get("SENTRY_DSN"),
        traces_sample_rate=0.05,
        attach_stacktrace=True,
        integrations=[AwsLambdaIntegration()],
    )
app = FastAPI()
executor = ThreadPoolExecutor()


async def catch_exceptions_middleware(request, call_next):
    try:
        return await call_next(request)
    except Exception as e:
        logging.exception(e)
        return Response("Internal server error", status_code=500)


# Add this middleware first so 500 errors have CORS headers
app.middleware("http")(catch_exceptions_middleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=[
        "http://localhost:5173",
        "https://www.warcraftlogs.com",
    ],
    allow_methods=["*"],
    allow_headers=["*"],
)


class SourceModel(BaseModel):
    id: int
    name: str
    pets: List[int] = []


class EncounterModel(BaseModel):
    id: int = 0
    name: str = "Unknown"


class AnalyzeRequest(BaseModel):
    source: SourceModel
    encounter: EncounterModel = EncounterModel()
    start_time: int
    end_time: int
    combatant_info: Optional[Dict] = None
    events: List[Dict] = Field(default_factory=list)

    def to_fight(self) -> Fight:
        return Fight(
            Source(self.source.id, self.source.name, set(self.source.pets)),
            Encounter(self.encounter.id, self.encounter.name),
            self.start_time,
            self.end_time,
            self.events,
            self.combatant_info,
        )


class AnalyzeResponse(BaseModel):
    data: Dict


@app.post("/analyze_fight", response_model=AnalyzeResponse)
async def analyze_fight(request: AnalyzeRequest, response: Response):
    if request.end_time < request.start_time:
        response.status_code = 400
        return {"data": {"error": "Fight ends before it starts"}}

    loop = asyncio.get_running_loop()

    try:
        fight = request.to_fight()
        analysis = await loop.run_in_executor(
            executor, functools.partial(analyze, fight)
        )
    except AnalysisError as e:
        response.status_code = 400
        return {"data": {"error": str(e)}}

    response.headers["Cache-Control"] = "no-cache"
    return {"data": analysis}
