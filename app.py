import os
import logging
from typing import List

from fastapi import FastAPI, HTTPException, Depends, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from sqlalchemy.orm import Session

from database import Base, engine, SessionLocal
from schemas import (
    MinedBlock, Overview, PendingTransactionRow, PendingTransaction, Transaction, TriggerConditions,
)
from conditions import ConditionStore, ConditionValidationError, SqlKeyValueStore
from client import ChainClient, RemoteServiceError
from rules import can_mine, failed_rules

# ---------- Config ----------
REMOTE_API_URL = os.getenv("REMOTE_API_URL", "http://localhost:5000/api")
REQUEST_TIMEOUT = float(os.getenv("REQUEST_TIMEOUT", "10"))
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Supply Chain Trigger Gate", version="0.1.0")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------- Dependencies ----------
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def get_condition_store(db: Session = Depends(get_db)) -> ConditionStore:
    return ConditionStore(SqlKeyValueStore(db))

def get_client():
    # one client (and requests.Session) per request, sessions are not shared across workers
    client = ChainClient(REMOTE_API_URL, timeout=REQUEST_TIMEOUT)
    try:
        yield client
    finally:
        client.close()

@app.on_event("startup")
def on_startup():
    Base.metadata.create_all(bind=engine)

@app.exception_handler(RemoteServiceError)
def remote_error_handler(request: Request, exc: RemoteServiceError):
    return JSONResponse(
        status_code=502,
        content={"detail": str(exc), "upstream_status": exc.status_code},
    )

# ---------- Chain ----------
@app.get("/api/chain", response_model=List[MinedBlock])
def get_chain(client: ChainClient = Depends(get_client)):
    return client.get_chain()

@app.get("/api/overview", response_model=Overview)
def overview(
    client: ChainClient = Depends(get_client),
    store: ConditionStore = Depends(get_condition_store),
):
    return Overview(
        pending_count=len(client.get_pending_transactions()),
        chain_length=len(client.get_chain()),
        conditions=store.load(),
    )

# ---------- Pending transactions ----------
@app.get("/api/pending-transactions", response_model=List[PendingTransactionRow])
def list_pending(
    client: ChainClient = Depends(get_client),
    store: ConditionStore = Depends(get_condition_store),
):
    cond = store.load()
    rows = []
    for tx in client.get_pending_transactions():
        failed = failed_rules(tx, cond)
        rows.append(PendingTransactionRow(
            **tx.model_dump(),
            meets_conditions=not failed,
            failed_rules=failed,
        ))
    return rows

@app.post("/api/transactions", status_code=201)
def create_transaction(body: PendingTransaction, client: ChainClient = Depends(get_client)):
    if body.id:
        raise HTTPException(status_code=400, detail="new transactions must not carry an _id, use PUT to edit")
    message = client.create_transaction(body)
    logger.info("transaction created: %s -> %s (%s)", body.sender, body.recipient, body.product)
    return {"message": message}

@app.put("/api/transactions/{tx_id}")
def update_transaction(tx_id: str, body: Transaction, client: ChainClient = Depends(get_client)):
    message = client.update_transaction(tx_id, body)
    logger.info("transaction %s updated", tx_id)
    return {"message": message}

@app.delete("/api/transactions/{tx_id}")
def delete_transaction(tx_id: str, client: ChainClient = Depends(get_client)):
    message = client.delete_transaction(tx_id)
    logger.info("transaction %s deleted", tx_id)
    return {"message": message}

# ---------- Trigger conditions ----------
@app.get("/api/trigger-conditions", response_model=TriggerConditions)
def get_trigger_conditions(store: ConditionStore = Depends(get_condition_store)):
    return store.load()

@app.put("/api/trigger-conditions", response_model=TriggerConditions)
def save_trigger_conditions(body: TriggerConditions, store: ConditionStore = Depends(get_condition_store)):
    try:
        return store.save(body)
    except ConditionValidationError as e:
        raise HTTPException(status_code=422, detail={"message": str(e), "missing": e.missing})

# ---------- Mining ----------
@app.post("/api/mine")
def mine_block(
    client: ChainClient = Depends(get_client),
    store: ConditionStore = Depends(get_condition_store),
):
    # gate on a fresh snapshot, not on whatever the operator last listed
    decision = can_mine(client.get_pending_transactions(), store.load())
    if not decision.allowed:
        ids = [tx.id for tx in decision.offending]
        logger.warning("mining refused, %d transaction(s) fail the trigger conditions: %s", len(ids), ids)
        raise HTTPException(status_code=409, detail={
            "message": "Some transactions do not meet the trigger conditions. "
                       "Please update or delete them before mining.",
            "offending": [tx.model_dump(by_alias=True, mode="json") for tx in decision.offending],
        })
    message = client.mine()
    logger.info("block mined: %s", message)
    return {"message": message}

@app.post("/api/clear")
def clear_chain(client: ChainClient = Depends(get_client)):
    message = client.clear()
    logger.info("blockchain cleared")
    return {"message": message}

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=int(os.getenv("PORT", "8000")))
