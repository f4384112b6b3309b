from .base import Base
from .models.profile import UserProfileRecord  # Registers user_profiles table
from .models.content import AppContent  # Registers app_content table
from .models.hadith_book import HadithBook  # Registers hadith_books table
