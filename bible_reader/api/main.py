from fastapi import FastAPI

from bible_reader.api.routes import router

app = FastAPI(title="Bible Reader")
app.include_router(router)
