import pytest
from httpx import AsyncClient

from scholaro.utils.database import QUESTIONS

from .conftest import API


def question_doc(text='What is 2 + 2?', difficulty='easy', section='Quantitative', **overrides):
    doc = {
        'test_type': 'GRE',
        'section': section,
        'question': text,
        'options': ['3', '4', '5', '6'],
        'correct_answer': 1,
        'explanation': '2 + 2 = 4',
        'difficulty': difficulty,
    }
    doc.update(overrides)
    return doc


@pytest.fixture
async def questions(db):
    docs = [
        question_doc('first', 'easy'),
        question_doc('second', 'hard'),
        question_doc('third', 'easy'),
        question_doc('verbal', 'easy', section='Verbal'),
    ]
    for doc in docs:
        await db[QUESTIONS].insert_one(doc)
    return docs


async def test_questions_hide_answers(client: AsyncClient, questions):
    response = await client.get(f'{API}/questions/GRE/Quantitative')

    assert response.status_code == 200
    data = response.json()
    assert len(data) == 3
    for question in data:
        assert 'correctAnswer' not in question
        assert 'explanation' not in question
        assert question['options'] == ['3', '4', '5', '6']


async def test_questions_newest_first(client: AsyncClient, questions):
    response = await client.get(f'{API}/questions/GRE/Quantitative')

    assert [q['question'] for q in response.json()] == ['third', 'second', 'first']


async def test_questions_filter_and_limit(client: AsyncClient, questions):
    easy = await client.get(f'{API}/questions/GRE/Quantitative', params={'difficulty': 'easy'})
    limited = await client.get(f'{API}/questions/GRE/Quantitative', params={'limit': 1})

    assert [q['question'] for q in easy.json()] == ['third', 'first']
    assert [q['question'] for q in limited.json()] == ['third']


async def test_questions_reject_unknown_difficulty(client: AsyncClient, questions):
    response = await client.get(f'{API}/questions/GRE/Quantitative', params={'difficulty': 'brutal'})

    assert response.status_code == 400


async def test_check_answer_correct(client: AsyncClient, questions):
    question_id = str(questions[0]['_id'])

    response = await client.post(
        f'{API}/check-answer', json={'questionId': question_id, 'userAnswer': 1}
    )

    assert response.status_code == 200
    assert response.json() == {'correct': True, 'correctAnswer': 1, 'explanation': '2 + 2 = 4'}


async def test_check_answer_incorrect(client: AsyncClient, questions):
    question_id = str(questions[0]['_id'])

    response = await client.post(
        f'{API}/check-answer', json={'questionId': question_id, 'userAnswer': 3}
    )

    assert response.json() == {'correct': False, 'correctAnswer': 1, 'explanation': '2 + 2 = 4'}


@pytest.mark.parametrize('question_id', ['65a1f0c2e4b0a1b2c3d4e5f6', 'not-an-id'])
async def test_check_answer_unknown_question(client: AsyncClient, questions, question_id):
    response = await client.post(
        f'{API}/check-answer', json={'questionId': question_id, 'userAnswer': 0}
    )

    assert response.status_code == 404
    assert response.json() == {'error': 'Question not found'}


async def test_admin_creates_question(client: AsyncClient, admin_auth_headers, db):
    payload = {
        'testType': 'GMAT',
        'section': 'Quant',
        'question': 'What is 3 squared?',
        'options': ['6', '9'],
        'correctAnswer': 1,
        'difficulty': 'easy',
    }

    response = await client.post(f'{API}/questions', json=payload, headers=admin_auth_headers)

    assert response.status_code == 201
    assert response.json()['correctAnswer'] == 1
    assert await db[QUESTIONS].count_documents({'test_type': 'GMAT'}) == 1


async def test_question_answer_index_must_be_valid(client: AsyncClient, admin_auth_headers, db):
    payload = {
        'testType': 'GMAT',
        'section': 'Quant',
        'question': 'What is 3 squared?',
        'options': ['6', '9'],
        'correctAnswer': 2,
    }

    response = await client.post(f'{API}/questions', json=payload, headers=admin_auth_headers)

    assert response.status_code == 400
    assert await db[QUESTIONS].count_documents({}) == 0


async def test_non_admin_cannot_create_question(client: AsyncClient, auth_headers, db):
    payload = {
        'testType': 'GMAT',
        'section': 'Quant',
        'question': 'What is 3 squared?',
        'options': ['6', '9'],
        'correctAnswer': 1,
    }

    response = await client.post(f'{API}/questions', json=payload, headers=auth_headers)

    assert response.status_code == 403
    assert response.json() == {'error': 'Admin access required'}


@pytest.mark.parametrize('user_answer', ['1', 1.0, True])
async def test_check_answer_requires_integer_index(client: AsyncClient, questions, user_answer):
    question_id = str(questions[0]['_id'])

    response = await client.post(
        f'{API}/check-answer', json={'questionId': question_id, 'userAnswer': user_answer}
    )

    assert response.status_code == 400
