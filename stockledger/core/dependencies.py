from typing import Optional

from fastapi import Header, HTTPException, status


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """
    Identidad del usuario que hace la petición.

    La autenticación real queda fuera de este servicio: el gateway entrega
    el id del usuario ya verificado en la cabecera X-User-Id.
    """
    user_id = (x_user_id or "").strip()

    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing user identity",
        )

    return user_id
