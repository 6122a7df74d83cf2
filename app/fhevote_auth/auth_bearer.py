from fastapi import Request, HTTPException, Cookie
from fastapi.security import HTTPBearer

from app import config
from app.fhevote.exceptions import ConfigurationError

import jwt


def signing_key() -> str:
    if not config.SECRET_KEY:
        raise ConfigurationError("SECRET_KEY is not set")
    return config.SECRET_KEY


def create_access_token(address: str) -> str:
    return jwt.encode({"address": address}, signing_key(), algorithm="HS256")


def decodeJWT(token: str) -> str | None:
    try:
        decoded_token = jwt.decode(token, signing_key(), algorithms=["HS256"])
    except jwt.PyJWTError:
        raise HTTPException(status_code=403, detail="Invalid token or expired token.")
    return decoded_token.get("address")


class AuthWallet(HTTPBearer):

    """
    HTTPBearer class resolving the connected wallet address.

    The token may come as a Bearer header or as the access_token cookie.
    With required=False a missing token yields None instead of a 403, so
    the caller can answer as an unconnected session.
    """

    def __init__(self, required: bool = True):
        super(AuthWallet, self).__init__(auto_error=False)
        self.required = required

    async def __call__(self, request: Request, access_token: str = Cookie(None)) -> str | None:
        credentials = await super(AuthWallet, self).__call__(request)
        token = credentials.credentials if credentials else access_token

        if not token:
            if self.required:
                raise HTTPException(status_code=403, detail="Authorization token not provided.")
            return None

        address = decodeJWT(token)
        if not address:
            raise HTTPException(status_code=403, detail="Invalid token or expired token.")
        return address
