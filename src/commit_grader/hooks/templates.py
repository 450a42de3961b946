"""Git hook templates for grading commit messages."""

HOOK_MARKER = "commit-grader"


def get_commit_msg_hook(is_windows: bool) -> str:
    """Get commit-msg hook content.

    Args:
        is_windows: Whether to generate Windows batch script

    Returns:
        Hook script content
    """
    if is_windows:
        return """@echo off
REM commit-grader commit-msg hook
REM Reject commit messages that score below the configured minimum

REM Check if hook is enabled
for /f "tokens=*" %%i in ('git config --get hooks.commitGrader') do set ENABLED=%%i
if not "%ENABLED%"=="true" exit /b 0

REM Get minimum score from config or default to 7
for /f "tokens=*" %%i in ('git config --get hooks.commitGraderMinScore') do set MIN_SCORE=%%i
if "%MIN_SCORE%"=="" set MIN_SCORE=7

commit-grader check "%1" --min-score %MIN_SCORE%
"""
    else:
        return """#!/bin/sh
# commit-grader commit-msg hook
# Reject commit messages that score below the configured minimum

COMMIT_MSG_FILE=$1

# Check if hook is enabled
ENABLED=$(git config --get hooks.commitGrader)
if [ "$ENABLED" != "true" ]; then
    exit 0
fi

# Get minimum score from config or default to 7
MIN_SCORE=$(git config --get hooks.commitGraderMinScore)
MIN_SCORE=${MIN_SCORE:-7}

exec commit-grader check "$COMMIT_MSG_FILE" --min-score "$MIN_SCORE"
"""
