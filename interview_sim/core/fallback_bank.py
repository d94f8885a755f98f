"""
Fallback Question Bank for interview-sim

A static, ordered list of questions per (topic, style) category, used once
the remote question service has failed. Lookups are deterministic: the same
category and asked count always produce the same question.
"""

import logging

from interview_sim.models.interview import InterviewStyle, QuestionCategory

logger = logging.getLogger(__name__)

DEFAULT_COMPANY = "our company"

# Topic-specific technical questions, keyed by lower-cased topic
TOPIC_QUESTIONS: dict[tuple[str, InterviewStyle], list[str]] = {
    ("python", InterviewStyle.TECHNICAL): [
        "What is the difference between a list and a tuple in Python, and when would you use each?",
        "How do generators work, and when would you choose one over building a list?",
        "Explain how Python's garbage collection handles reference cycles.",
        "What problems does the GIL cause, and how do you work around them?",
        "How would you structure a Python package so that it is easy to test?",
        "Walk me through how you would profile and speed up a slow Python service.",
        "What are decorators, and can you describe one you have written?",
        "How do you manage dependencies and environments across Python projects?",
    ],
    ("javascript", InterviewStyle.TECHNICAL): [
        "Explain the JavaScript event loop and how promises are scheduled.",
        "What is the difference between let, const and var?",
        "How does prototypal inheritance work in JavaScript?",
        "What are closures, and where have you relied on them?",
        "How would you debug a memory leak in a long-running Node.js process?",
        "Compare callbacks, promises and async/await for handling asynchronous code.",
        "How do you keep bundle size under control in a large front-end application?",
        "What strategies do you use to make JavaScript code testable?",
    ],
    ("system design", InterviewStyle.TECHNICAL): [
        "Design a URL shortening service. What are the main components?",
        "How would you design a rate limiter for a public API?",
        "Walk me through how you would scale a read-heavy service to ten times its load.",
        "How do you decide between a relational and a document database?",
        "Design a notification system that supports email, SMS and push.",
        "How would you make a service resilient to the failure of one of its dependencies?",
        "Explain how you would approach caching for a frequently updated dataset.",
        "What would you monitor to know that a distributed system is healthy?",
    ],
}

# Templates used for any topic without a dedicated list
STYLE_QUESTIONS: dict[InterviewStyle, list[str]] = {
    InterviewStyle.TECHNICAL: [
        "Can you explain the core concepts of {topic} to someone new to it?",
        "What is the most challenging {topic} problem you have solved, and how did you approach it?",
        "How do you keep up with new developments in {topic}?",
        "What are the common pitfalls in {topic}, and how do you avoid them?",
        "How would you test and validate work in {topic}?",
        "Describe a trade-off you made in a {topic} project and why you made it.",
        "How would you explain a {topic} design decision to a non-technical stakeholder?",
        "Where do you see {topic} heading over the next few years?",
    ],
    InterviewStyle.HR: [
        "Tell me about yourself and what brought you to {topic}.",
        "Why are you interested in joining {company}?",
        "What are your greatest strengths, and where do you want to grow?",
        "Where do you see yourself in five years?",
        "What kind of work environment helps you do your best work?",
        "Why are you looking to leave your current role?",
        "How would your previous colleagues describe you?",
        "Do you have any questions for us about {company}?",
    ],
    InterviewStyle.BEHAVIORAL: [
        "Tell me about a time you faced a difficult challenge in {topic}. What did you do?",
        "Describe a situation where you disagreed with a teammate. How was it resolved?",
        "Give an example of a goal you set and how you achieved it.",
        "Tell me about a time you made a mistake. What did you learn?",
        "Describe a time you had to deliver under a tight deadline.",
        "Tell me about a time you took the lead without being asked.",
        "Give an example of how you handled feedback you did not agree with.",
        "Describe a situation where you had to learn something new quickly.",
    ],
    InterviewStyle.SALARY_NEGOTIATION: [
        "What are your salary expectations for this {topic} role?",
        "How did you arrive at that number?",
        "Our budget for this role at {company} is below your expectation. How would you respond?",
        "Which parts of the compensation package matter most to you besides base salary?",
        "Are you considering other offers at the moment?",
        "What would make you accept an offer today?",
        "How flexible are you on start date and benefits?",
    ],
    InterviewStyle.CASE_STUDY: [
        "{company} wants to grow its {topic} business by 20% next year. How would you approach this?",
        "How would you estimate the market size for a new {topic} product?",
        "Profits in the {topic} division have fallen for three quarters. How would you investigate?",
        "A competitor has launched a cheaper {topic} offering. How should {company} respond?",
        "Which metrics would you track to judge the success of a {topic} launch?",
        "How would you prioritise three competing {topic} initiatives with limited budget?",
        "Walk me through how you would present your recommendation to leadership.",
    ],
}


class FallbackQuestionBank:
    """
    Deterministic local question source.

    ``next`` returns ``None`` once the category's list is used up; callers
    treat that as the natural end of the interview.
    """

    def __init__(
        self,
        topic_questions: dict[tuple[str, InterviewStyle], list[str]] | None = None,
        style_questions: dict[InterviewStyle, list[str]] | None = None,
    ):
        self.topic_questions = TOPIC_QUESTIONS if topic_questions is None else topic_questions
        self.style_questions = STYLE_QUESTIONS if style_questions is None else style_questions

    def questions_for(self, category: QuestionCategory) -> list[str]:
        """Get the ordered question list for a category."""
        key = (category.topic.strip().lower(), category.style)
        if key in self.topic_questions:
            return list(self.topic_questions[key])

        company = category.company_name or DEFAULT_COMPANY
        return [
            template.format(topic=category.topic, company=company)
            for template in self.style_questions.get(category.style, [])
        ]

    def size(self, category: QuestionCategory) -> int:
        """Number of questions available for a category."""
        return len(self.questions_for(category))

    def next(self, category: QuestionCategory, asked_count: int) -> str | None:
        """
        Get the question at position ``asked_count``.

        Args:
            category: Topic and style of the interview
            asked_count: Questions already asked in the session

        Returns:
            Question text, or None when the bank is exhausted
        """
        if asked_count < 0:
            raise ValueError("asked_count must be >= 0")

        questions = self.questions_for(category)
        if asked_count >= len(questions):
            logger.info(
                f"Fallback bank exhausted for {category.topic!r}/{category.style.value} "
                f"after {len(questions)} question(s)"
            )
            return None

        return questions[asked_count]
