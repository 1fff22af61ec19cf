"""Captcha detection and CapSolver-based resolution."""

from .detector import CaptchaDetector, find_captcha_markers, has_captcha_markers
from .solver import CapSolverClient, CaptchaResolver, next_poll_state

__all__ = [
    'CaptchaDetector',
    'CaptchaResolver',
    'CapSolverClient',
    'find_captcha_markers',
    'has_captcha_markers',
    'next_poll_state',
]
