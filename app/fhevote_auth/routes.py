from fastapi import APIRouter, Depends

from app.fhevote.model import schemas
from app.fhevote_auth.auth_bearer import AuthWallet, create_access_token
from app.logger import logger

auth_router = APIRouter(prefix="/fhevote/api")


@auth_router.post("/login", status_code=201, response_model=schemas.TokenOut)
async def login_wallet(login_in: schemas.LoginIn):
    """
    Opens an identity session for a wallet address
    """
    logger.info("Wallet session opened: %s" % login_in.address)
    return {"token": create_access_token(login_in.address)}


@auth_router.get("/me", status_code=200)
async def get_wallet(address: str = Depends(AuthWallet())):
    """
    Returns the address bound to the current session
    """
    return {"address": address}
