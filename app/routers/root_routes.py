from fastapi import APIRouter

router = APIRouter()


@router.get("/")
def read_root():
    return {"message": "Link Canvas metadata server is running!"}
