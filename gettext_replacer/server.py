from fastapi import FastAPI, HTTPException
from pydantic import BaseModel
from typing import List, Optional, Union
from dotenv import load_dotenv
import os
from dataclasses import asdict

from .config import context_plural_callees, load_config
from .errors import NoReplacementsError
from .models import ReplacementRegistry, TranslationEntry
from .replacer import replace_message_nodes_async
from .walker import MessageCollector, STRING_SOURCE_FILENAME

# Load environment variables from .env file
load_dotenv()

app = FastAPI()

# Place your config.json next to the working directory or point GETTEXT_REPLACER_CONFIG at it
CONFIG_PATH = os.getenv("GETTEXT_REPLACER_CONFIG")


class CatalogEntry(BaseModel):
    msgid: str
    msgstr: Union[str, List[str]] = ""
    msgctxt: Optional[str] = None
    msgid_plural: Optional[str] = None


class ExtractRequest(BaseModel):
    source: str
    file_name: Optional[str] = None


class RewriteRequest(BaseModel):
    source: str
    file_name: Optional[str] = None
    entries: List[CatalogEntry] = []


class Message(BaseModel):
    text: str
    context: Optional[str] = None
    text_plural: Optional[str] = None
    file_name: Optional[str] = None
    line: Optional[int] = None


class ExtractResponse(BaseModel):
    messages: List[Message]


class RewriteResponse(BaseModel):
    source: str
    changed: bool


class ConfigResponse(BaseModel):
    config: dict


def get_settings():
    # The service must not query itself for its configuration
    return load_config(config_path=CONFIG_PATH, use_service=False)


def _collect(source, file_name):
    config = get_settings()
    collector = MessageCollector.from_config(config)
    registry = ReplacementRegistry()
    try:
        source, messages = collector.parse_source_file(source, registry, file_name=file_name)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return config, source, messages, registry


@app.get("/config", response_model=ConfigResponse)
def get_config():
    return {"config": get_settings()}


@app.post("/extract", response_model=ExtractResponse)
def extract(req: ExtractRequest):
    _, _, messages, _ = _collect(req.source, req.file_name)
    return {"messages": [Message(**asdict(message)) for message in messages]}


@app.post("/rewrite", response_model=RewriteResponse)
async def rewrite(req: RewriteRequest):
    config, source, _, registry = _collect(req.source, req.file_name)
    catalog = [TranslationEntry(**entry.model_dump()) for entry in req.entries]
    try:
        new_source = await replace_message_nodes_async(
            source,
            req.file_name or STRING_SOURCE_FILENAME,
            catalog,
            registry,
            context_plural_callees(config),
        )
    except NoReplacementsError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"source": new_source, "changed": new_source != source}


def main():
    import uvicorn

    uvicorn.run(app, host=os.getenv("GETTEXT_REPLACER_HOST", "127.0.0.1"), port=int(os.getenv("GETTEXT_REPLACER_PORT", "8000")))


if __name__ == "__main__":
    main()
