DEMO_FORMS = [
    {
        "title": "Contact Form",
        "method": "POST",
        "action": "/contact",
        "fields": [
            {"type": "text", "name": "name", "label": "Full Name", "placeholder": "Enter your full name", "required": True},
            {"type": "email", "name": "email", "label": "Email Address", "placeholder": "Enter your email address", "required": True},
            {"type": "textarea", "name": "message", "label": "Message", "placeholder": "Enter your message", "required": True},
        ],
        "is_active": True,
    },
    {
        "title": "Registration Form",
        "method": "POST",
        "action": "/register",
        "fields": [
            {"type": "text", "name": "username", "label": "Username", "placeholder": "Choose a username", "required": True},
            {"type": "email", "name": "email", "label": "Email Address", "placeholder": "Enter your email address", "required": True},
            {
                "type": "select",
                "name": "role",
                "label": "Role",
                "required": True,
                "options": [
                    {"label": "User", "value": "user"},
                    {"label": "Editor", "value": "editor"},
                    {"label": "Contributor", "value": "contributor"},
                ],
            },
        ],
        "is_active": True,
    },
    {
        "title": "Customer Survey",
        "method": "POST",
        "action": "/survey",
        "fields": [
            {
                "type": "select",
                "name": "satisfaction",
                "label": "How satisfied are you with our service?",
                "required": True,
                "options": [
                    {"label": "Very Satisfied", "value": "very_satisfied"},
                    {"label": "Satisfied", "value": "satisfied"},
                    {"label": "Neutral", "value": "neutral"},
                    {"label": "Dissatisfied", "value": "dissatisfied"},
                    {"label": "Very Dissatisfied", "value": "very_dissatisfied"},
                ],
            },
            {
                "type": "textarea",
                "name": "feedback",
                "label": "Additional Feedback",
                "placeholder": "Please share your thoughts with us",
                "required": False,
            },
        ],
        "is_active": True,
    },
]
