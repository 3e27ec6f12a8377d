from typing import List

from .models import CategoryAverages


OVERALL_THRESHOLD = 0.4
CATEGORY_THRESHOLD = 0.5

OVERALL_TIP = (
    "Your pitches score low overall. Open with the problem, then the solution, "
    "then why you and why now, and close with a clear ask."
)
CLARITY_TIP = (
    "Clarity is lagging. Say what you do in one plain sentence before any detail "
    "and cut jargon the listener has to decode."
)
DEPTH_TIP = (
    "Depth is thin. Back your claims with concrete numbers, customer evidence "
    "or a short example of the product in use."
)
STRUCTURE_TIP = (
    "Structure needs work. Give the pitch a visible order and signal each "
    "transition so the listener always knows where they are."
)
POSITIVE_TIP = "Strong, balanced pitches so far. Keep practising to make the delivery consistent."


def generate_tips(average_score: float, category_averages: CategoryAverages) -> List[str]:
    tips: List[str] = []
    if average_score < OVERALL_THRESHOLD:
        tips.append(OVERALL_TIP)
    if category_averages.clarity < CATEGORY_THRESHOLD:
        tips.append(CLARITY_TIP)
    if category_averages.depth < CATEGORY_THRESHOLD:
        tips.append(DEPTH_TIP)
    if category_averages.structure < CATEGORY_THRESHOLD:
        tips.append(STRUCTURE_TIP)
    if not tips:
        tips.append(POSITIVE_TIP)
    return tips
