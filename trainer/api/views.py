import uuid

from django.core.exceptions import ObjectDoesNotExist
from django.core.management import call_command
from django.db import IntegrityError
from rest_framework import status, views
from rest_framework.decorators import api_view
from rest_framework.exceptions import NotFound
from rest_framework.response import Response
import structlog

from ..data.repos import list_groups, list_terms, to_card
from ..domain.enums import STATUS_LABELS, SessionState
from ..domain.types import ReviewOutcome
from ..errors import TrainerError
from ..services import cards as card_service
from ..services import reviews as review_service
from ..utils.time import to_epoch_ms
from .serializers import (
    AnswerSerializer,
    CardContentSerializer,
    DueQuerySerializer,
    GroupInSerializer,
    ReviewBatchSerializer,
    SessionStartSerializer,
    TermInSerializer,
)

base_logger = structlog.get_logger()


def bind_request_logger():
    # Create a unique request_id
    return base_logger.bind(request_id=str(uuid.uuid4()))


def group_payload(group):
    return {"id": group.id, "name": group.name, "is_default": group.is_default}


def term_payload(card):
    return {
        "id": card.id,
        "group_id": card.group_id,
        "term": card.term,
        "phonetic": card.phonetic,
        "term_translation": card.term_translation,
        "definition_en": card.definition_en,
        "definition_cn": card.definition_cn,
        "example": card.example,
        "wrong_definitions": list(card.wrong_definitions),
        "status": card.status.value,
        "status_label": STATUS_LABELS[card.status],
        "review_stage": card.review_stage,
        "next_review_utc": card.next_review_at.isoformat(),
        "next_review_ms": to_epoch_ms(card.next_review_at),
        "consecutive_failures": card.consecutive_failures,
    }


def session_payload(record_id, session):
    item = session.current
    payload = {
        "session_id": str(record_id),
        "state": session.state.value,
        "position": session.position,
        "queue_length": session.queue_length,
        "pool_size": session.pool_size,
        "question": None,
    }
    if item is not None and session.state == SessionState.PRESENTING:
        payload["question"] = {
            "term_id": item.term_id,
            "term": item.term,
            "phonetic": item.phonetic,
            "options": session.options,
        }
    if session.state == SessionState.FINISHED:
        payload["outcomes"] = [
            {"term_id": o.term_id, "success": o.success} for o in session.outcomes
        ]
    return payload


@api_view(["POST"])
def initialize_data(request):
    try:
        file_name = request.data.get("file", "MOCK_DATA.json")
        call_command("init_data", file=file_name)
        return Response(
            {"message": f"Data initialized successfully from {file_name}"},
            status=status.HTTP_200_OK,
        )
    except Exception as e:
        return Response({"error": str(e)}, status=status.HTTP_500_INTERNAL_SERVER_ERROR)


class GroupListView(views.APIView):
    def get(self, request):
        return Response({"groups": [group_payload(g) for g in list_groups()]})

    def post(self, request):
        s = GroupInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        group_id = s.validated_data.get("id")
        try:
            group = card_service.add_group(s.validated_data["name"], group_id)
        except IntegrityError:
            # Lost a race with another request creating the same id
            return Response(
                {"error": f"Group {group_id!r} already exists"},
                status=status.HTTP_409_CONFLICT,
            )
        return Response(group_payload(group), status=status.HTTP_201_CREATED)


class GroupDetailView(views.APIView):
    def delete(self, request, group_id):
        logger = bind_request_logger()
        try:
            removed = card_service.remove_group(group_id)
        except ObjectDoesNotExist:
            raise NotFound(f"Group {group_id} not found")
        except TrainerError as e:
            logger.info("group_delete_refused", group_id=group_id)
            return Response({"error": str(e)}, status=status.HTTP_409_CONFLICT)
        return Response({"group_id": group_id, "deleted_terms": removed})


class TermListView(views.APIView):
    def get(self, request):
        group_id = request.query_params.get("group")
        return Response(
            {"terms": [term_payload(to_card(t)) for t in list_terms(group_id)]}
        )

    def post(self, request):
        s = TermInSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        content = dict(s.validated_data)
        group_id = content.pop("group_id", None)
        try:
            term = card_service.accept_card(content, group_id)
        except ObjectDoesNotExist:
            raise NotFound(f"Group {group_id} not found")
        return Response(term_payload(to_card(term)), status=status.HTTP_201_CREATED)


class TermDetailView(views.APIView):
    def patch(self, request, term_id):
        s = CardContentSerializer(data=request.data, partial=True)
        s.is_valid(raise_exception=True)
        try:
            term = card_service.edit_term(term_id, **s.validated_data)
        except ObjectDoesNotExist:
            raise NotFound(f"Term {term_id} not found")
        return Response(term_payload(to_card(term)))

    def delete(self, request, term_id):
        if not card_service.remove_term(term_id):
            raise NotFound(f"Term {term_id} not found")
        return Response(status=status.HTTP_204_NO_CONTENT)


class DueTermsView(views.APIView):
    def get(self, request):
        logger = bind_request_logger()

        qs = DueQuerySerializer(data=request.query_params)
        qs.is_valid(raise_exception=True)
        until = qs.validated_data.get("until")
        group_id = qs.validated_data.get("group")

        try:
            due = review_service.due_cards(group_id=group_id, until=until)
        except ObjectDoesNotExist:
            raise NotFound(f"Group {group_id} not found")
        results = [c.id for c in due]

        logger.info(
            "due_terms_api_response",
            group_id=group_id,
            until_utc=until.isoformat() if until else None,
            term_count=len(results),
        )

        return Response(
            {
                "group_id": group_id,
                "until_utc": until.isoformat() if until else None,
                "term_ids": results,
                "count": len(results),
            }
        )


class ReviewBatchView(views.APIView):
    def post(self, request):
        logger = bind_request_logger()

        s = ReviewBatchSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        outcomes = [
            ReviewOutcome(o["term_id"], o["success"])
            for o in s.validated_data["outcomes"]
        ]

        updated = review_service.record_outcomes(outcomes)

        logger.info(
            "review_api_response",
            outcome_count=len(outcomes),
            updated_count=len(updated),
        )
        return Response({"terms": [term_payload(c) for c in updated]})


class SessionListView(views.APIView):
    def post(self, request):
        logger = bind_request_logger()

        s = SessionStartSerializer(data=request.data)
        s.is_valid(raise_exception=True)
        group_id = s.validated_data.get("group_id")

        try:
            record, session = review_service.start_session(group_id=group_id)
        except ObjectDoesNotExist:
            raise NotFound(f"Group {group_id} not found")

        logger.info(
            "session_api_response",
            session_id=str(record.id),
            state=session.state.value,
            pool_size=session.pool_size,
        )
        return Response(session_payload(record.id, session), status=status.HTTP_201_CREATED)


class SessionDetailView(views.APIView):
    def get(self, request, session_id):
        try:
            record, session = review_service.load_session(session_id)
        except ObjectDoesNotExist:
            raise NotFound(f"Session {session_id} not found")
        return Response(session_payload(record.id, session))

    def delete(self, request, session_id):
        try:
            record, session = review_service.abandon_session(session_id)
        except ObjectDoesNotExist:
            raise NotFound(f"Session {session_id} not found")
        return Response(session_payload(record.id, session))


class SessionAnswerView(views.APIView):
    def post(self, request, session_id):
        logger = bind_request_logger()

        s = AnswerSerializer(data=request.data)
        s.is_valid(raise_exception=True)

        try:
            result = review_service.answer_question(
                session_id, s.validated_data["position"], s.validated_data["option"]
            )
        except ObjectDoesNotExist:
            raise NotFound(f"Session {session_id} not found")

        logger.info(
            "answer_api_response",
            session_id=str(session_id),
            ignored=result.ignored,
            correct=result.correct,
            state=result.session.state.value,
        )

        payload = session_payload(session_id, result.session)
        payload["ignored"] = result.ignored
        payload["correct"] = result.correct
        payload["correct_answer"] = result.item.answer if result.item else None
        return Response(payload)
