from django.core.management.base import BaseCommand

from apps.gigs.models import Category

DEFAULT_CATEGORIES = [
    {
        "name": "Web Development",
        "description": "Frontend, backend, and full-stack development services",
        "icon": "💻",
        "subcategories": ["Frontend Development", "Backend Development", "Full-Stack Development", "WordPress", "E-commerce"],
    },
    {
        "name": "Design",
        "description": "Graphic design, UI/UX, and creative services",
        "icon": "🎨",
        "subcategories": ["Logo Design", "UI/UX Design", "Graphic Design", "Brand Identity", "Print Design"],
    },
    {
        "name": "Writing & Content",
        "description": "Content writing, copywriting, and editing services",
        "icon": "✍️",
        "subcategories": ["Content Writing", "Copywriting", "Technical Writing", "Editing & Proofreading", "Creative Writing"],
    },
    {
        "name": "Video & Animation",
        "description": "Video editing, animation, and multimedia services",
        "icon": "🎬",
        "subcategories": ["Video Editing", "Animation", "Motion Graphics", "Explainer Videos", "Social Media Videos"],
    },
    {
        "name": "Tutoring & Education",
        "description": "Academic tutoring and educational support",
        "icon": "📚",
        "subcategories": ["Math Tutoring", "Science Tutoring", "Language Tutoring", "Test Prep", "Assignment Help"],
    },
    {
        "name": "Digital Marketing",
        "description": "Social media, SEO, and online marketing services",
        "icon": "📈",
        "subcategories": ["Social Media Marketing", "SEO", "Content Marketing", "Email Marketing", "PPC Advertising"],
    },
    {
        "name": "Data & Analytics",
        "description": "Data analysis, research, and statistical services",
        "icon": "📊",
        "subcategories": ["Data Analysis", "Research", "Statistical Analysis", "Data Visualization", "Survey Design"],
    },
    {
        "name": "Mobile Development",
        "description": "iOS, Android, and cross-platform app development",
        "icon": "📱",
        "subcategories": ["iOS Development", "Android Development", "React Native", "Flutter", "App Design"],
    },
]


class Command(BaseCommand):
    help = "Insert the default marketplace categories if none exist yet."

    def handle(self, *args, **options):
        if Category.objects.exists():
            self.stdout.write("Categories already seeded.")
            return

        Category.objects.bulk_create(
            [Category(is_active=True, **data) for data in DEFAULT_CATEGORIES]
        )
        self.stdout.write(self.style.SUCCESS(f"Seeded {len(DEFAULT_CATEGORIES)} categories."))
