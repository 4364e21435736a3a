from faker import Faker
from faker.providers import BaseProvider


class BookProvider(BaseProvider):
    """
    图书发行演示数据生成器
    生成书名、出版社、校区等专有名词 (英文，保证 PDF 默认字体可渲染)
    """

    subjects = [
        'Mathematics', 'Physics', 'Chemistry', 'Biology', 'English Grammar',
        'Urdu Literature', 'Computer Science', 'Economics', 'History', 'Geography',
        'Islamic Studies', 'Accounting', 'General Science', 'Statistics', 'Pakistan Studies'
    ]

    title_prefixes = [
        'Fundamentals of', 'Essential', 'Introduction to', 'Applied',
        'Advanced', 'Principles of', 'Practical', 'A Course in'
    ]

    category_names = [
        'Textbooks', 'Workbooks', 'Reference', 'Fiction', 'Children',
        'Exam Preparation', 'Dictionaries', 'Teaching Guides'
    ]

    publisher_suffixes = ['Publishers', 'Book Depot', 'Press', 'Books', 'Distributors']

    campus_suffixes = ['Campus', 'Junior Branch', 'Senior Branch', 'Girls Campus', 'Boys Campus']

    editions = ['1st', '2nd', '3rd', '4th', '5th']

    def book_title(self):
        """生成书名，例如 'Applied Physics Grade 9'"""
        grade = self.random_int(1, 12)
        return f"{self.random_element(self.title_prefixes)} {self.random_element(self.subjects)} Grade {grade}"

    def book_categories(self, count):
        """不重复的分类名"""
        return self.random_elements(self.category_names, length=min(count, len(self.category_names)), unique=True)

    def book_edition(self):
        return f"{self.random_element(self.editions)} Edition"

    def publisher_name(self):
        return f"{self.generator.last_name()} {self.random_element(self.publisher_suffixes)}"

    def campus_name(self):
        return f"{self.generator.city()} {self.random_element(self.campus_suffixes)}"


# 初始化 Faker 并添加自定义 Provider
fake = Faker('en_US')
fake.add_provider(BookProvider)
