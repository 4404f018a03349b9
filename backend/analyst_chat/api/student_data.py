"""Auto-login lookup: resolve a student's display name from the external API."""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from analyst_chat.core.errors import AppError
from analyst_chat.services.student_directory import (
    StudentDirectory,
    get_student_directory,
    resolve_student_name,
)

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("")
async def student_data(id: str | None = None, directory: StudentDirectory = Depends(get_student_directory)):
    if not id:
        return JSONResponse(
            status_code=401,
            content={"success": False, "message": "Student ID missing (Authentication required)"},
        )

    try:
        data = await directory.fetch_student(id)
    except AppError as e:
        logger.error(f"Error fetching student data for auto-login: {e.detail}")
        return JSONResponse(
            status_code=500,
            content={"success": False, "message": "Internal server error fetching student data"},
        )

    name = resolve_student_name(data.get("profile"))
    if not name:
        return JSONResponse(
            status_code=404,
            content={"success": False, "message": "Could not resolve student name from profile"},
        )

    return {"success": True, "studentInfo": {"studentId": id, "studentName": name}}
