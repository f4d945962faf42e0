import hashlib
import bcrypt

def _prehash(password: str) -> bytes:
    # bcrypt only reads the first 72 bytes
    return hashlib.sha256(password.encode("utf-8")).digest()

def hash_password(password:str) -> str:
    hashed = bcrypt.hashpw(_prehash(password), bcrypt.gensalt())
    return hashed.decode()

def verify_password(password:str, hashed_password:str | None) -> bool:
    if not hashed_password:
        return False
    return bcrypt.checkpw(_prehash(password), hashed_password.encode())
