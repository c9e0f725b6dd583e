"""
Inspiration gallery: example prompts shown before the first generation.
`image` values are permanent static assets, never locally-allocated previews.
"""

from __future__ import annotations

EXAMPLE_GALLERY: list[dict[str, str]] = [
    {
        "image": "/static/examples/bw-portrait.png",
        "title": "Black and white portrait",
        "description": "Timeless monochrome face captures.",
        "prompt": (
            "Create a stunning black and white portrait with dramatic lighting "
            "and professional composition."
        ),
    },
    {
        "image": "/static/examples/watercolor-character-painting.jpg",
        "title": "Character watercolor painting",
        "description": "Transform ordinary photo into a watercolor...",
        "prompt": (
            "Transform this photo into a beautiful watercolor painting with soft colors "
            "and artistic brush strokes."
        ),
    },
    {
        "image": "/static/examples/three-view-character-diagram.jpg",
        "title": "Three-view diagram",
        "description": "Generates precise three-angle technical...",
        "prompt": (
            "Create a three-view character diagram showing front, side, and back views "
            "with consistent style."
        ),
    },
    {
        "image": "/static/examples/business-portrait-professional.jpg",
        "title": "Business portrait",
        "description": "Professional headshots for career use.",
        "prompt": "Generate a professional business portrait with clean background and formal attire.",
    },
    {
        "image": "/static/examples/illustration-cartoon-style.jpg",
        "title": "Add Illustration",
        "description": "Enhance images with artistic flair.",
        "prompt": "Add playful cartoon illustrations and decorative elements to enhance the image.",
    },
    {
        "image": "/static/examples/character-pose-grid-six-views.jpg",
        "title": "Character pose six-grid",
        "description": "Display six dynamic pose variations.",
        "prompt": "Create a six-panel grid showing the character in different dynamic poses and angles.",
    },
]

