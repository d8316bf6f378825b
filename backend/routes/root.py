# backend/routes/root.py
from fastapi import APIRouter, Depends, status
from fastapi.responses import JSONResponse

from config import Settings, get_settings
from schemas.response import success_response
from utils.clock import rfc3339

router = APIRouter(tags=["Root"])

ENDPOINTS = {
    "GET  /": "API information and available endpoints",
    "POST /enquiry": "Create a new enquiry",
    "POST /create-user": "Create a new admin/super-admin user",
    "POST /auth/signin": "User sign-in with JWT authentication",
    "POST /auth/login": "User login (legacy endpoint)",
    "POST /auth/refresh": "Exchange a valid token for a new one",
    "GET  /enquiries": "Get all enquiries with pagination, filtering by enquiry_type and date (protected - requires auth)",
    "GET  /enquiries/{id}": "Get enquiry by ID (protected - requires auth)",
    "GET  /users": "Get all users (protected - requires auth)",
    "GET  /users/{id}": "Get user by ID (protected - requires auth)",
    "PUT  /users/{id}": "Update user (protected - requires auth)",
    "DELETE /users/{id}": "Delete user (protected - requires auth)",
    "GET  /health": "Health check endpoint",
}


@router.get("/")
def read_root(settings: Settings = Depends(get_settings)):
    return success_response(
        status.HTTP_200_OK,
        "Welcome to RGP Backend Enquiry API",
        {
            "endpoints": ENDPOINTS,
            "version": settings.APP_VERSION,
            "description": "RGP Backend Enquiry Management System",
            "status": "running",
        },
    )


# Liveness check; the body is not wrapped in the response envelope
@router.get("/health")
def health(settings: Settings = Depends(get_settings)):
    return JSONResponse({
        "status": "healthy",
        "message": "Service is running",
        "environment": settings.APP_ENV,
        "timestamp": rfc3339(),
    })

