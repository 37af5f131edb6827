"""
Request body schemas.

Each route that takes a JSON body names one of these models with
``@validate_body``; the validated model is passed to the view as ``payload``.
"""
from functools import wraps
from typing import Optional, Union

import pydantic
from flask import request
from pydantic import BaseModel, EmailStr, Field

from .errors import ValidationError


class SignUp(BaseModel):
    username: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    password: str = Field(..., min_length=4)


class ReviewIn(BaseModel):
    user_id: int
    movie_id: Union[int, str]
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)
    time: str = Field(..., pattern=r"^([01]\d|2[0-3]):[0-5]\d$", description="HH:MM")


class ReviewUpdate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    body: str = Field(..., min_length=1)


class WatchlistEntryIn(BaseModel):
    user_id: Optional[int] = None
    movie_id: Union[int, str]


def validate_body(schema):
    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            data = request.get_json(silent=True)
            if data is None:
                raise ValidationError([{"field": "body", "message": "expected a JSON object"}])
            try:
                payload = schema.model_validate(data)
            except pydantic.ValidationError as exc:
                problems = [
                    {"field": ".".join(str(p) for p in e["loc"]) or "body", "message": e["msg"]}
                    for e in exc.errors()
                ]
                raise ValidationError(problems) from exc
            return view(payload, *args, **kwargs)
        return wrapper
    return decorator
