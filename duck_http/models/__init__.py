"""Public models for duck-http."""

from duck_http.models.form import MultipartFormSection
from duck_http.models.response import HttpResponse, ResponseType

__all__ = ["HttpResponse", "MultipartFormSection", "ResponseType"]
