from fastapi import APIRouter, Request


router = APIRouter(prefix="/healthz", tags=["health"])


@router.get("")
def healthz(request: Request):
    directory = getattr(request.app.state, "airport_directory", None)
    return {"status": "ok", "airports": len(directory) if directory is not None else 0}
