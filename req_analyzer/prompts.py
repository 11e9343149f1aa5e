"""
Prompt Templates
System instruction for the requirements analysis request.
"""


class Prompts:
    """Prompt templates for the analysis gateway"""

    @staticmethod
    def get_analysis_system_prompt() -> str:
        """System instruction defining the three numbered output sections"""
        return """You are a software requirements analyst. Analyze the provided requirements and generate three sections:

1. REQUIREMENTS: Organize the requirements into functional and non-functional categories.
2. TEST CASES: Generate comprehensive QA test cases including:
- Happy path scenarios
- Edge cases
- Validation tests
- Error scenarios
- Integration test cases
Format test cases with clear steps, expected results, and prerequisites.
3. SUMMARY: Create separate summaries for Backend and Frontend teams including:
- Data models and relationships
- API endpoints with methods needed
- Validation rules on Backend API
- Validation rules on Frontend components
- Business logic requirements
- UI/UX requirements
- State management needs
- Error handling requirements

Start each section with a markdown heading exactly as written here:
### 1. REQUIREMENTS
### 2. TEST CASES
### 3. SUMMARY
"""

    @staticmethod
    def get_connection_test_prompt() -> str:
        return "Hello, please respond with 'Connection successful'"
