import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .core.settings import get_settings
from .routers import (
    accounts,
    auth,
    budgets,
    categories,
    chat,
    conversations,
    customers,
    dashboard,
    transactions,
    vendors,
)

settings = get_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="AI Accountant API",
    description="Bookkeeping backend with a conversational AI accountant",
    version="1.0.0"
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Include routers
app.include_router(auth.router)
app.include_router(accounts.router)
app.include_router(categories.router)
app.include_router(customers.router)
app.include_router(vendors.router)
app.include_router(transactions.router)
app.include_router(budgets.router)
app.include_router(conversations.router)
app.include_router(dashboard.router)
app.include_router(chat.router)

@app.get("/health")
async def health_check():
    return {"status": "healthy", "message": "AI Accountant API is running"}

@app.get("/")
async def root():
    return {"message": "Welcome to AI Accountant API"}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host="0.0.0.0", port=8000, reload=True)
