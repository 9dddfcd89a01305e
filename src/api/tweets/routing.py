import logging

from fastapi import APIRouter, Depends, status
from sqlmodel import Session, select

from api.auth.utils import get_current_user, require_owner
from api.db.cascade import delete_tweet_dependents
from api.db.models import Tweet, User, utc_now
from api.db.session import get_session
from api.errors import NotFound, api_response
from api.utils import parse_id

from .models import TweetCreate, TweetRead

# Set up logging
logger = logging.getLogger("tweets")

router = APIRouter()


@router.post("/", status_code=status.HTTP_201_CREATED)
def create_tweet(
    payload: TweetCreate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet = Tweet(content=payload.content, owner_id=current_user.id)
    db_session.add(tweet)
    db_session.commit()
    db_session.refresh(tweet)

    logger.info(f"User {current_user.id} created tweet {tweet.id}")
    return api_response(TweetRead.model_validate(tweet), "Tweet created successfully")


@router.get("/user/{user_id}")
def get_user_tweets(
    user_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    """
    All tweets of a user, newest first.
    """
    user_id = parse_id(user_id, "user ID")
    if db_session.get(User, user_id) is None:
        raise NotFound("User not found")

    tweets = db_session.exec(
        select(Tweet).where(Tweet.owner_id == user_id).order_by(Tweet.created_at.desc())
    ).all()
    return api_response(
        [TweetRead.model_validate(t) for t in tweets],
        "Tweets fetched successfully",
    )


@router.patch("/{tweet_id}")
def update_tweet(
    tweet_id: str,
    payload: TweetCreate,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet_id = parse_id(tweet_id, "tweet ID")
    tweet = require_owner(db_session, Tweet, tweet_id, current_user, "Tweet", "update")

    tweet.content = payload.content
    tweet.updated_at = utc_now()
    db_session.add(tweet)
    db_session.commit()
    db_session.refresh(tweet)

    logger.info(f"User {current_user.id} updated tweet {tweet_id}")
    return api_response(TweetRead.model_validate(tweet), "Tweet updated successfully")


@router.delete("/{tweet_id}")
def delete_tweet(
    tweet_id: str,
    db_session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    tweet_id = parse_id(tweet_id, "tweet ID")
    tweet = require_owner(db_session, Tweet, tweet_id, current_user, "Tweet", "delete")

    delete_tweet_dependents(db_session, tweet)
    db_session.delete(tweet)
    db_session.commit()

    logger.info(f"User {current_user.id} deleted tweet {tweet_id}")
    return api_response({"id": tweet_id}, "Tweet deleted successfully")
