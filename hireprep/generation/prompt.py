from typing import Sequence

from hireprep.ai.types import ChatMessage
from hireprep.schemas.prep import Question

QUESTION_SCHEMA = (
    "{\n"
    '  "question": "string (the interview question - MUST be specific to tech stack mentioned in JD)",\n'
    '  "difficulty": "Easy" | "Medium" | "Hard",\n'
    '  "category": "string (include the specific technology, e.g. \'React Hooks\', \'PostgreSQL Optimization\', \'AWS Lambda\')",\n'
    '  "modelAnswer": "string (detailed answer with examples, can include markdown formatting)",\n'
    '  "keyPoints": ["array of key points to mention"],\n'
    '  "followUps": ["array of common follow-up questions - also tech-specific"]\n'
    "}"
)

GENERATE_MIN_QUESTIONS = 12
GENERATE_MAX_QUESTIONS = 18
CONTINUE_MIN_QUESTIONS = 6
CONTINUE_MAX_QUESTIONS = 10

_GENERATE_SYSTEM = (
    "You are an expert technical interview coach. Your task is to analyze a candidate's resume "
    "and a job description, then generate a comprehensive interview preparation package.\n\n"
    "**CRITICAL INSTRUCTION - Tech Stack Specific Questions:**\n"
    "First, carefully identify ALL specific technologies, frameworks, libraries, tools, and tech stacks "
    "mentioned in the job description. Examples include but are not limited to:\n"
    "- Programming languages (Python, Java, TypeScript, Go, Rust, etc.)\n"
    "- Frontend frameworks (React, Vue, Angular, Next.js, etc.)\n"
    "- Backend frameworks (Node.js, Django, Spring Boot, FastAPI, etc.)\n"
    "- Databases (PostgreSQL, MongoDB, Redis, DynamoDB, etc.)\n"
    "- Cloud platforms (AWS, GCP, Azure) and specific services (Lambda, S3, EC2, etc.)\n"
    "- DevOps tools (Docker, Kubernetes, Terraform, CI/CD pipelines, etc.)\n"
    "- Data/ML tools (Spark, TensorFlow, PyTorch, Pandas, etc.)\n"
    "- Other tools (GraphQL, REST, gRPC, Kafka, RabbitMQ, Elasticsearch, etc.)\n\n"
    "Then generate questions that are HIGHLY SPECIFIC to these identified technologies. "
    'DO NOT generate generic questions like "How do you handle errors?" Instead, ask tech-specific '
    "questions like:\n"
    "- \"How does React's useEffect cleanup function work and when would you use it?\"\n"
    '- "Explain the difference between Redis persistence modes (RDB vs AOF)"\n'
    '- "How would you optimize a slow PostgreSQL query involving multiple JOINs?"\n'
    '- "Describe how Kubernetes handles pod scheduling and what factors influence it"\n\n'
    "Generate a JSON response with the following structure:\n"
    "{\n"
    f'  "questions": [{QUESTION_SCHEMA}],\n'
    '  "prepPlan": {\n'
    '    "topicsToRevise": ["array of topics to study - be specific about which technologies to focus on"],\n'
    '    "timeline": "string (suggested study timeline with breakdown, can use markdown)",\n'
    '    "resources": ["array of recommended resources - include official docs and tutorials"]\n'
    "  },\n"
    '  "skillGapAnalysis": {\n'
    '    "strengths": ["array of candidate\'s strengths based on resume - highlight matching technologies"],\n'
    '    "gaps": ["array of skill gaps between resume and JD - be specific about which technologies"],\n'
    '    "recommendations": "string (detailed recommendations to bridge gaps, can use markdown)"\n'
    "  }\n"
    "}\n\n"
    f"Generate {GENERATE_MIN_QUESTIONS}-{GENERATE_MAX_QUESTIONS} diverse questions. At least 70% of "
    "technical questions MUST be directly related to specific technologies mentioned in the job "
    "description. Every prepPlan and skillGapAnalysis field MUST be non-empty. Include a mix of:\n"
    "- Technology-specific deep-dive questions (e.g., React internals, database optimization, cloud architecture)\n"
    "- System design questions using the specific tech stack from the JD\n"
    "- Debugging/troubleshooting scenarios with the mentioned technologies\n"
    "- Best practices and patterns for the specific frameworks/tools\n"
    "- Behavioral questions related to working with these technologies in a team setting"
)

_CONTINUE_SYSTEM = (
    "You are an expert technical interview coach. Generate additional interview questions based on "
    "a candidate's resume and job description.\n\n"
    "**CRITICAL: DO NOT REPEAT ANY OF THE EXISTING QUESTIONS. Generate completely NEW and DIFFERENT questions.**\n\n"
    "Generate questions that are HIGHLY SPECIFIC to technologies mentioned in the job description. Focus on:\n"
    "- Different aspects of the same technologies\n"
    "- Edge cases and advanced scenarios\n"
    "- Alternative approaches and trade-offs\n"
    "- Real-world problem-solving scenarios\n"
    "- System design variations\n\n"
    "Generate a JSON response with the following structure:\n"
    f'{{\n  "questions": [{QUESTION_SCHEMA}]\n}}\n\n'
    f"Generate {CONTINUE_MIN_QUESTIONS}-{CONTINUE_MAX_QUESTIONS} NEW questions that are different "
    "from the existing ones."
)


def format_existing_questions(existing: Sequence[Question]) -> str:
    return "\n".join(f"{i}. {q.question}" for i, q in enumerate(existing, start=1))


def build_generate_messages(resume: str, job_description: str) -> list[ChatMessage]:
    user = (
        f"Resume:\n{resume}\n\n"
        f"Job Description:\n{job_description}\n\n"
        "Please analyze the job description carefully, identify ALL specific technologies and tech "
        "stacks mentioned, and generate a comprehensive interview preparation package with questions "
        "that are SPECIFIC to those technologies. Avoid generic questions - focus on the actual tech "
        "stack required for this role."
    )
    return [
        ChatMessage(role="system", content=_GENERATE_SYSTEM),
        ChatMessage(role="user", content=user),
    ]


def build_continue_messages(
    resume: str,
    job_description: str,
    existing: Sequence[Question],
) -> list[ChatMessage]:
    user = (
        f"Resume:\n{resume}\n\n"
        f"Job Description:\n{job_description}\n\n"
        f"**EXISTING QUESTIONS (DO NOT REPEAT THESE):**\n{format_existing_questions(existing)}\n\n"
        f"Generate {CONTINUE_MIN_QUESTIONS}-{CONTINUE_MAX_QUESTIONS} NEW interview questions that are "
        "COMPLETELY DIFFERENT from the existing ones. Focus on different aspects, edge cases, and "
        "advanced scenarios."
    )
    return [
        ChatMessage(role="system", content=_CONTINUE_SYSTEM),
        ChatMessage(role="user", content=user),
    ]
