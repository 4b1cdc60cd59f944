from fastapi import APIRouter, Depends, status

from identity_store.api.deps import get_user_repository
from identity_store.repositories.user import UserRepository
from identity_store.schemas.user import (
    UserCreate,
    UserIdentifiers,
    UserPatch,
    UserResponse,
)

router = APIRouter()


@router.post("", response_model=UserIdentifiers, status_code=status.HTTP_201_CREATED)
def create_user(data: UserCreate, repo: UserRepository = Depends(get_user_repository)):
    return repo.create(one=data.one, two=data.two)


@router.get("/internal/{internal_id}", response_model=UserResponse)
def get_user_by_internal_id(
    internal_id: int,
    repo: UserRepository = Depends(get_user_repository),
):
    return repo.get_by_internal_id(internal_id)


@router.patch("/internal/{internal_id}", response_model=UserResponse)
def update_user_by_internal_id(
    internal_id: int,
    patch: UserPatch,
    repo: UserRepository = Depends(get_user_repository),
):
    return repo.update_by_internal_id(internal_id, patch.changes())


@router.get("/{user_id}", response_model=UserResponse)
def get_user(user_id: int, repo: UserRepository = Depends(get_user_repository)):
    return repo.get(user_id)


@router.patch("/{user_id}", response_model=UserResponse)
def update_user(
    user_id: int,
    patch: UserPatch,
    repo: UserRepository = Depends(get_user_repository),
):
    return repo.update(user_id, patch.changes())


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_user(user_id: int, repo: UserRepository = Depends(get_user_repository)):
    repo.delete(user_id)
