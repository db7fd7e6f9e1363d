"""Sample word bank and table maintenance helpers."""
import logging
from typing import Dict, List

from sqlalchemy.orm import Session

from wordquiz.models.dto import ImportResult
from wordquiz.models.models import QuizAttempt, QuizSession, Word
from wordquiz.services.word_service import WordService

logger = logging.getLogger(__name__)

SAMPLE_WORDS: List[Dict[str, str]] = [
    # Easy words
    {"text": "cat", "clues": "A small furry pet that meows|It chases mice", "difficulty": "easy"},
    {"text": "dog", "clues": "A loyal pet that barks|Man's best friend", "difficulty": "easy"},
    {"text": "sun", "clues": "The bright star in our sky|It rises in the east", "difficulty": "easy"},
    {"text": "moon", "clues": "Shines at night in the sky|It has phases", "difficulty": "easy"},
    {"text": "tree", "clues": "A tall plant with leaves and branches|Birds build nests in it", "difficulty": "easy"},
    {"text": "bird", "clues": "An animal that can fly and has feathers|It lays eggs in a nest", "difficulty": "easy"},
    {"text": "fish", "clues": "Lives in water and has gills|It swims with fins", "difficulty": "easy"},
    {"text": "book", "clues": "Something you read with pages|You find it in a library", "difficulty": "easy"},
    {"text": "cake", "clues": "A sweet dessert for birthdays|It can have candles on top", "difficulty": "easy"},
    {"text": "rain", "clues": "Water that falls from clouds|You need an umbrella for it", "difficulty": "easy"},
    # Medium words
    {"text": "elephant", "clues": "A large animal with a trunk|It never forgets", "difficulty": "medium"},
    {"text": "butterfly", "clues": "A colorful insect that flies|It starts life as a caterpillar", "difficulty": "medium"},
    {"text": "mountain", "clues": "A very tall landform|Climbers try to reach its peak", "difficulty": "medium"},
    {"text": "ocean", "clues": "A very large body of salt water|Whales live in it", "difficulty": "medium"},
    {"text": "rainbow", "clues": "Colors in the sky after rain|It has seven colors", "difficulty": "medium"},
    {"text": "library", "clues": "A place with many books to read|You borrow books here", "difficulty": "medium"},
    {"text": "picture", "clues": "A drawing or photograph|It can hang on a wall", "difficulty": "medium"},
    {"text": "friend", "clues": "Someone you like to spend time with|A buddy or pal", "difficulty": "medium"},
    {"text": "school", "clues": "A place where you learn|Teachers work here", "difficulty": "medium"},
    {"text": "family", "clues": "Your parents, siblings, and relatives|People you live with", "difficulty": "medium"},
    # Hard words
    {"text": "adventure", "clues": "An exciting or unusual experience|Explorers go on one", "difficulty": "hard"},
    {"text": "beautiful", "clues": "Very pretty or attractive|The opposite of ugly", "difficulty": "hard"},
    {"text": "challenge", "clues": "Something difficult that tests your abilities|A dare or a contest", "difficulty": "hard"},
    {"text": "discovery", "clues": "Finding something new or unknown|Scientists make them", "difficulty": "hard"},
    {"text": "excellent", "clues": "Very good or outstanding|Better than great", "difficulty": "hard"},
    {"text": "fantastic", "clues": "Amazing or wonderful|Almost too good to be true", "difficulty": "hard"},
    {"text": "imagination", "clues": "The ability to create pictures in your mind|Writers use a lot of it", "difficulty": "hard"},
    {"text": "journey", "clues": "A long trip or adventure|It begins with a single step", "difficulty": "hard"},
    {"text": "knowledge", "clues": "Information and understanding|What you gain by studying", "difficulty": "hard"},
    {"text": "learning", "clues": "Gaining new skills or information|What you do at school", "difficulty": "hard"},
]


def seed_words(db: Session) -> ImportResult:
    """Load the sample word bank, skipping words that already exist."""
    result = WordService(db).import_words(SAMPLE_WORDS)
    logger.info(f"Seeded word bank: {result.imported} new words")
    return result


def truncate_tables(db: Session) -> Dict[str, int]:
    """Delete every attempt, session and word, children first."""
    counts = {}
    for model in (QuizAttempt, QuizSession, Word):
        counts[model.__tablename__] = db.query(model).delete(synchronize_session=False)
    db.commit()
    logger.info(f"Truncated tables: {counts}")
    return counts
