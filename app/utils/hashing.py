from pwdlib import PasswordHash

password_hash = PasswordHash.recommended()  # argon2id


def get_password_hash(plain: str) -> str:
    return password_hash.hash(plain)


def verify_password(plain: str, hashed: str) -> bool:
    if not plain or not hashed:
        return False
    return password_hash.verify(plain, hashed)
