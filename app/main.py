from fastapi import FastAPI
from app.api.routes import router as api_router

app = FastAPI(title="Six Hour Layover Booking Webhook")

app.include_router(api_router)

@app.get("/")
async def read_root():
    return {"message": "Six Hour Layover webhook API is running"}
