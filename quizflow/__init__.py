"""QuizFlow: quizzes with customizable completion pages."""

__version__ = "0.1.0"
